from .temporal import NullableTemporalSpecification, Temporal, TemporalSpecification

__all__ = [
    "NullableTemporalSpecification",
    "Temporal",
    "TemporalSpecification",
]
