from .builder import Spec, SpecificationBuilder
from .errs import BuilderError, BuilderNotStartedError

__all__ = [
    "BuilderError",
    "BuilderNotStartedError",
    "Spec",
    "SpecificationBuilder",
]
