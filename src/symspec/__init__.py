import logging

from .builder import BuilderNotStartedError, Spec, SpecificationBuilder
from .compiler import compile_specification
from .diagnostics import (
    EvaluationDetail,
    EvaluationResult,
    RichTraceStyle,
    evaluate_with_trace,
    explain,
)
from .expr import (
    EntityTypeMismatchError,
    Lambda,
    Symbol,
    UnboundVariableError,
    Var,
    substitute,
)
from .performance import CachedSpecification, MemoizedSpecification, cached, memoized
from .properties import Property
from .specification import (
    AnySpecification,
    ConditionalSpecification,
    EmptyOperandsError,
    ExpressionSpecification,
    InvalidArgumentError,
    NoneSpecification,
    Specification,
    ThresholdOutOfRangeError,
    all_of,
    any_of,
    as_optional,
    at_least,
    at_most,
    exactly,
    is_specification,
    none_of,
    satisfies,
    when,
    where,
)
from .temporal import Temporal

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AnySpecification",
    "BuilderNotStartedError",
    "CachedSpecification",
    "ConditionalSpecification",
    "EmptyOperandsError",
    "EntityTypeMismatchError",
    "EvaluationDetail",
    "EvaluationResult",
    "ExpressionSpecification",
    "InvalidArgumentError",
    "Lambda",
    "MemoizedSpecification",
    "NoneSpecification",
    "Property",
    "RichTraceStyle",
    "Spec",
    "Specification",
    "SpecificationBuilder",
    "Symbol",
    "Temporal",
    "ThresholdOutOfRangeError",
    "UnboundVariableError",
    "Var",
    "all_of",
    "any_of",
    "as_optional",
    "at_least",
    "at_most",
    "cached",
    "compile_specification",
    "evaluate_with_trace",
    "exactly",
    "explain",
    "is_specification",
    "memoized",
    "none_of",
    "satisfies",
    "substitute",
    "when",
    "where",
]
