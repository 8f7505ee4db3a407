from __future__ import annotations

from typing import Any, TypeVar

from symspec.expr.functions import all_match, any_match
from symspec.expr.nodes import Call, Compare, Const
from symspec.properties.base import ElementPredicate, PropertyAccessor, element_lambda
from symspec.specification import Specification

T_contra = TypeVar("T_contra", contravariant=True)


class CollectionMixin(PropertyAccessor[T_contra]):
    """
    Operators on a sized, iterable path.
    """

    def _count(self) -> Call:
        return Call(len, (self.path,))

    def has_item(self, item: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(Compare("in", Const(item), self.path))

    def is_empty(self) -> Specification[T_contra]:
        return self._build(Compare("==", self._count(), Const(0)))

    def is_not_empty(self) -> Specification[T_contra]:
        return self._build(Compare(">", self._count(), Const(0)))

    def has_count(self, count: int) -> Specification[T_contra]:
        return self._build(Compare("==", self._count(), Const(count)))

    def has_min_count(self, count: int) -> Specification[T_contra]:
        return self._build(Compare(">=", self._count(), Const(count)))

    def has_max_count(self, count: int) -> Specification[T_contra]:
        return self._build(Compare("<=", self._count(), Const(count)))

    def any_item(self, predicate: ElementPredicate) -> Specification[T_contra]:
        """
        At least one element satisfies ``predicate``.

        Examples:
            ```python
            has_bulk_line = Property.of(lambda o: o.lines).any_item(lambda line: line.quantity >= 10)
            ```
        """
        return self._build(Call(any_match, (self.path, element_lambda(predicate))))

    def all_items(self, predicate: ElementPredicate) -> Specification[T_contra]:
        """
        Every element satisfies ``predicate``. Holds for an empty collection.
        """
        return self._build(Call(all_match, (self.path, element_lambda(predicate))))
