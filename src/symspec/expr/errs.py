from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class ExpressionError(Exception):
    """Base class for exceptions in this module."""

    ...


class UnboundVariableError(ExpressionError):
    """
    Raised when a tree references a variable that is not bound by its lambda.
    """

    def __init__(self, variables: Iterable[Any]):
        """
        Args:
            variables: the unbound variables.
        """
        self.variables = tuple(variables)

        names = ", ".join(getattr(v, "name", repr(v)) for v in self.variables)
        super().__init__(f"Expression references unbound variables: {names}")


class EntityTypeMismatchError(ExpressionError, TypeError):
    """
    Raised when two variables with unrelated entity types are merged into one tree.
    """

    def __init__(self, expected: Any, actual: Any):  # noqa: ANN401
        self.expected = expected
        self.actual = actual

        super().__init__(f"Cannot bind a variable of {actual!r} where {expected!r} is expected")


class NotASymbolError(ExpressionError, TypeError):
    """Raised when a symbol is used in a way that cannot be recorded as a tree."""

    def __init__(self, message: str):
        super().__init__(message)
