from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from symspec.expr.nodes import Compare, Const, Not
from symspec.expr.substitute import substitute
from symspec.expr.symbol import Symbol
from symspec.properties.base import ElementPredicate, element_lambda
from symspec.properties.collection import CollectionMixin
from symspec.properties.comparable import ComparableMixin
from symspec.properties.strings import StringMixin
from symspec.specification import Specification

T_contra = TypeVar("T_contra", contravariant=True)


class PropertySpecification(ComparableMixin[T_contra], StringMixin[T_contra], CollectionMixin[T_contra]):
    """
    Generate leaf specifications about one selected path of the entity.

    Examples:
        ```python
        price = Property.of(lambda p: p.price)
        mid_range = price.in_range(100, 500)
        assert mid_range.explain() == "(price >= 100) AND (price <= 500)"
        ```
    """

    def equal_to(self, value: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(Compare("==", self.path, Const(value)))

    def not_equal_to(self, value: Any) -> Specification[T_contra]:  # noqa: ANN401
        return self._build(Compare("!=", self.path, Const(value)))

    def is_none(self) -> Specification[T_contra]:
        return self._build(Compare("is", self.path, Const(None)))

    def is_not_none(self) -> Specification[T_contra]:
        return self._build(Compare("is not", self.path, Const(None)))

    def in_(self, values: Iterable[Any]) -> Specification[T_contra]:
        return self._build(Compare("in", self.path, Const(tuple(values))))

    def not_in(self, values: Iterable[Any]) -> Specification[T_contra]:
        return self._build(Not(Compare("in", self.path, Const(tuple(values)))))

    def matches(self, predicate: ElementPredicate) -> Specification[T_contra]:
        """
        Apply a predicate written for the property value to the property of the entity.

        The predicate's variable is replaced with the selected path, so the result is one flat tree over the entity.
        """
        lam = element_lambda(predicate, name="value")
        return self._build(substitute(lam.body, lam.param, self.path))


class Property:
    """
    Entry point for property specifications.
    """

    @staticmethod
    def of(
        selector: Callable[[Symbol], Any],
        *,
        entity_type: Any = None,  # noqa: ANN401
    ) -> PropertySpecification[Any]:
        """
        Select a path of the entity, e.g. ``Property.of(lambda o: o.customer.name)``.
        """
        return PropertySpecification.select(selector, entity_type=entity_type)
