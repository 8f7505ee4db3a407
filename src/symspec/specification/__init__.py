from .composite import (
    AllSpecification,
    AnyOfSpecification,
    AtLeastSpecification,
    AtMostSpecification,
    ExactlySpecification,
    all_of,
    any_of,
    at_least,
    at_most,
    exactly,
    none_of,
)
from .errs import (
    EmptyOperandsError,
    InvalidArgumentError,
    MissingOperandError,
    SpecificationError,
    ThresholdOutOfRangeError,
)
from .pipeline import (
    ConditionalSpecification,
    ConditionalSpecificationBuilder,
    LazyAndSpecification,
    LazyOrSpecification,
    as_optional,
    when,
)
from .specification import (
    AndNotSpecification,
    AndSpecification,
    AnySpecification,
    CompositeSpecification,
    ExpressionSpecification,
    IffSpecification,
    ImpliesSpecification,
    NandSpecification,
    NoneSpecification,
    NorSpecification,
    NotSpecification,
    OrSpecification,
    Specification,
    XorSpecification,
    is_specification,
    satisfies,
    where,
)

__all__ = [
    "AllSpecification",
    "AndNotSpecification",
    "AndSpecification",
    "AnyOfSpecification",
    "AnySpecification",
    "AtLeastSpecification",
    "AtMostSpecification",
    "CompositeSpecification",
    "ConditionalSpecification",
    "ConditionalSpecificationBuilder",
    "EmptyOperandsError",
    "ExactlySpecification",
    "ExpressionSpecification",
    "IffSpecification",
    "ImpliesSpecification",
    "InvalidArgumentError",
    "LazyAndSpecification",
    "LazyOrSpecification",
    "MissingOperandError",
    "NandSpecification",
    "NoneSpecification",
    "NorSpecification",
    "NotSpecification",
    "OrSpecification",
    "Specification",
    "SpecificationError",
    "ThresholdOutOfRangeError",
    "XorSpecification",
    "all_of",
    "any_of",
    "as_optional",
    "at_least",
    "at_most",
    "exactly",
    "is_specification",
    "none_of",
    "satisfies",
    "when",
    "where",
]
