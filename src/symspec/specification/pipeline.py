from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from symspec.expr.nodes import And, Call, Conditional, Lambda, Or
from symspec.expr.substitute import rebind
from symspec.specification.errs import MissingOperandError
from symspec.specification.specification import (
    AnySpecification,
    NoneSpecification,
    Specification,
    SpecificationFactory,
    common_entity_type,
    is_specification,
)

T_contra = TypeVar("T_contra", contravariant=True)

Condition = Callable[[T_contra], bool] | Specification[T_contra]


@dataclass(frozen=True, eq=False, kw_only=True)
class ConditionalSpecification(Specification[T_contra]):
    """
    ``when_true`` if ``condition`` holds for the entity, ``when_false`` otherwise.

    ``condition`` is either a specification, whose tree is inlined as the test, or an opaque callable, which appears
    as a call leaf.

    Raises:
        EntityTypeMismatchError: If the specifications involved are declared over unrelated entity types.
    """

    condition: Condition[T_contra]
    when_true: Specification[T_contra]
    when_false: Specification[T_contra] = field(default_factory=AnySpecification)

    _entity_type: Any = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if self.condition is None:
            raise MissingOperandError("condition")
        if self.when_true is None:
            raise MissingOperandError("when_true")
        if self.when_false is None:
            object.__setattr__(self, "when_false", AnySpecification())

        involved = [self.when_true, self.when_false]
        if is_specification(self.condition):
            involved.append(self.condition)
        object.__setattr__(self, "_entity_type", common_entity_type(*involved))

    @property
    def entity_type(self) -> Any:  # noqa: ANN401
        return self._entity_type

    def is_satisfied_by(self, entity: T_contra) -> bool:
        branch = self.when_true if self.condition(entity) else self.when_false
        return branch.is_satisfied_by(entity)

    def to_symbolic(self) -> Lambda:
        branches = [self.when_true.to_symbolic(), self.when_false.to_symbolic()]
        if is_specification(self.condition):
            param, (test, if_true, if_false) = rebind([self.condition.to_symbolic(), *branches])
        else:
            param, (if_true, if_false) = rebind(branches)
            test = Call(self.condition, (param,))
        return Lambda(param, Conditional(test, if_true, if_false))


class ConditionalSpecificationBuilder(Generic[T_contra]):
    """
    Pending conditional, completed by choosing what happens when the condition does not hold.
    """

    def __init__(
        self,
        base: Specification[T_contra] | None,
        condition: Condition[T_contra],
        when_true: Specification[T_contra],
    ):
        self._base = base
        self._condition = condition
        self._when_true = when_true

    def otherwise(self, specification: Specification[T_contra]) -> Specification[T_contra]:
        conditional = ConditionalSpecification(
            condition=self._condition,
            when_true=self._when_true,
            when_false=specification,
        )
        return conditional if self._base is None else self._base.and_(conditional)

    def otherwise_pass(self) -> Specification[T_contra]:
        return self.otherwise(AnySpecification())

    def otherwise_fail(self) -> Specification[T_contra]:
        return self.otherwise(NoneSpecification())


@dataclass(frozen=True, eq=False, kw_only=True)
class LazyAndSpecification(Specification[T_contra]):
    """
    AND whose right operand is built on demand.

    Evaluation only calls ``second_factory`` when ``first`` is satisfied; the symbolic form always calls it.
    """

    first: Specification[T_contra]
    second_factory: SpecificationFactory[T_contra]

    @property
    def entity_type(self) -> Any:  # noqa: ANN401
        return self.first.entity_type

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return self.first.is_satisfied_by(entity) and self.second_factory().is_satisfied_by(entity)

    def to_symbolic(self) -> Lambda:
        param, (a, b) = rebind([self.first.to_symbolic(), self.second_factory().to_symbolic()])
        return Lambda(param, And(a, b))


@dataclass(frozen=True, eq=False, kw_only=True)
class LazyOrSpecification(Specification[T_contra]):
    """
    OR whose right operand is built on demand.

    Evaluation only calls ``second_factory`` when ``first`` is not satisfied; the symbolic form always calls it.
    """

    first: Specification[T_contra]
    second_factory: SpecificationFactory[T_contra]

    @property
    def entity_type(self) -> Any:  # noqa: ANN401
        return self.first.entity_type

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return self.first.is_satisfied_by(entity) or self.second_factory().is_satisfied_by(entity)

    def to_symbolic(self) -> Lambda:
        param, (a, b) = rebind([self.first.to_symbolic(), self.second_factory().to_symbolic()])
        return Lambda(param, Or(a, b))


def when(condition: Condition[T_contra], then: Specification[T_contra]) -> ConditionalSpecificationBuilder[T_contra]:
    """
    Start a conditional specification that is not attached to another specification.

    Examples:
        ```python
        rule = when(lambda o: o.is_priority, where(lambda o: o.total > 100)).otherwise_pass()
        ```
    """
    return ConditionalSpecificationBuilder(None, condition, then)


def as_optional(specification: Specification[T_contra] | None) -> Specification[T_contra]:
    """
    ``specification``, or a specification that accepts everything when it is None.
    """
    return specification if specification is not None else AnySpecification()
