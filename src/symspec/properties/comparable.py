from __future__ import annotations

from typing import Any, TypeVar

from symspec.expr.nodes import And, Compare, Const, Or
from symspec.properties.base import PropertyAccessor
from symspec.specification import Specification

T_contra = TypeVar("T_contra", contravariant=True)


class ComparableMixin(PropertyAccessor[T_contra]):
    """
    Ordering comparisons on the selected path. Range bounds are inclusive unless the name says otherwise.
    """

    def greater_than(self, value: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(Compare(">", self.path, Const(value)))

    def greater_than_or_equal(self, value: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(Compare(">=", self.path, Const(value)))

    def less_than(self, value: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(Compare("<", self.path, Const(value)))

    def less_than_or_equal(self, value: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(Compare("<=", self.path, Const(value)))

    def in_range(self, low: Any, high: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(And(Compare(">=", self.path, Const(low)), Compare("<=", self.path, Const(high))))

    def in_range_exclusive(self, low: Any, high: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(And(Compare(">", self.path, Const(low)), Compare("<", self.path, Const(high))))

    def outside_range(self, low: Any, high: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(Or(Compare("<", self.path, Const(low)), Compare(">", self.path, Const(high))))
