from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from symspec.builder.errs import BuilderNotStartedError
from symspec.expr.symbol import Symbol
from symspec.specification import (
    AnySpecification,
    ExpressionSpecification,
    NoneSpecification,
    Specification,
    is_specification,
    where,
)

T_contra = TypeVar("T_contra", contravariant=True)

Condition = Callable[[Symbol], Any] | Specification[T_contra]
GroupBuilder = Callable[["SpecificationBuilder[T_contra]"], "SpecificationBuilder[T_contra]"]


class SpecificationBuilder(Generic[T_contra]):
    """
    Fluent construction of a specification, one condition at a time.

    Conditions are either specifications or functions written against a [Symbol][symspec.expr.Symbol]. Each call
    combines the new condition with everything built so far, left to right.

    Examples:
        ```python
        spec = (
            Spec.for_type(Product)
            .where(lambda p: p.price > 100)
            .and_(lambda p: p.stock > 0)
            .or_group(lambda g: g.where(lambda p: p.category == "Clearance"))
            .build()
        )
        ```
    """

    def __init__(self, *, entity_type: Any = None):  # noqa: ANN401
        self.entity_type = entity_type
        self._specification: Specification[T_contra] | None = None

    def _coerce(self, condition: Condition[T_contra]) -> Specification[T_contra]:
        if is_specification(condition):
            return condition
        return where(condition, entity_type=self.entity_type)

    def _started(self, operation: str) -> Specification[T_contra]:
        if self._specification is None:
            raise BuilderNotStartedError(operation)
        return self._specification

    def where(self, condition: Condition[T_contra]) -> SpecificationBuilder[T_contra]:
        """
        Start the specification, or AND ``condition`` onto it when already started.
        """
        spec = self._coerce(condition)
        self._specification = spec if self._specification is None else self._specification.and_(spec)
        return self

    def and_(self, condition: Condition[T_contra]) -> SpecificationBuilder[T_contra]:
        self._specification = self._started("and_").and_(self._coerce(condition))
        return self

    def or_(self, condition: Condition[T_contra]) -> SpecificationBuilder[T_contra]:
        self._specification = self._started("or_").or_(self._coerce(condition))
        return self

    def and_not(self, condition: Condition[T_contra]) -> SpecificationBuilder[T_contra]:
        self._specification = self._started("and_not").and_not(self._coerce(condition))
        return self

    def xor(self, condition: Condition[T_contra]) -> SpecificationBuilder[T_contra]:
        self._specification = self._started("xor").xor(self._coerce(condition))
        return self

    def not_(self) -> SpecificationBuilder[T_contra]:
        """
        Negate everything built so far.
        """
        self._specification = self._started("not_").not_()
        return self

    def group(self, build_group: GroupBuilder[T_contra]) -> SpecificationBuilder[T_contra]:
        """
        Build a parenthesized group with a fresh builder and AND it onto the specification.
        """
        inner = build_group(SpecificationBuilder(entity_type=self.entity_type)).build()
        self._specification = inner if self._specification is None else self._specification.and_(inner)
        return self

    def or_group(self, build_group: GroupBuilder[T_contra]) -> SpecificationBuilder[T_contra]:
        """
        Build a parenthesized group with a fresh builder and OR it onto the specification.
        """
        started = self._started("or_group")
        inner = build_group(SpecificationBuilder(entity_type=self.entity_type)).build()
        self._specification = started.or_(inner)
        return self

    def build(self) -> Specification[T_contra]:
        """
        The specification built so far, or one that accepts everything when nothing was added.
        """
        return self._specification if self._specification is not None else AnySpecification()

    def to_specification(self) -> ExpressionSpecification[T_contra]:
        """
        Flatten the built specification into a single expression specification.
        """
        return ExpressionSpecification(expression=self.build().to_symbolic())


class Spec:
    """
    Entry points for building specifications.
    """

    @staticmethod
    def for_type(entity_type: Any = None) -> SpecificationBuilder[Any]:  # noqa: ANN401
        return SpecificationBuilder(entity_type=entity_type)

    @staticmethod
    def where(condition: Callable[[Symbol], Any], *, entity_type: Any = None) -> Specification[Any]:  # noqa: ANN401
        return where(condition, entity_type=entity_type)

    @staticmethod
    def any() -> Specification[Any]:
        return AnySpecification()

    @staticmethod
    def none() -> Specification[Any]:
        return NoneSpecification()
