from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, ClassVar, TypeVar

from symspec.expr.evaluate import COMPARATORS
from symspec.expr.nodes import Add, And, Compare, Conditional, Const, Lambda, Node, Or, Var
from symspec.expr.substitute import rebind
from symspec.specification.errs import EmptyOperandsError, MissingOperandError, ThresholdOutOfRangeError
from symspec.specification.specification import NotSpecification, Specification, common_entity_type
from symspec.types import CompareOp

T_contra = TypeVar("T_contra", contravariant=True)


@dataclass(frozen=True, eq=False, kw_only=True)
class NarySpecification(Specification[T_contra], ABC):
    """
    Combinator over a non-empty sequence of specifications.

    Raises:
        EmptyOperandsError: If ``operands`` is empty.
        MissingOperandError: If one of the operands is None.
        EntityTypeMismatchError: If two operands are declared over unrelated entity types.
    """

    combinator: ClassVar[str]

    operands: tuple[Specification[T_contra], ...]

    _entity_type: Any = field(default=None, init=False, repr=False)

    def __post_init__(self):
        operands = tuple(self.operands)
        object.__setattr__(self, "operands", operands)
        if not operands:
            raise EmptyOperandsError(self.combinator)
        for i, operand in enumerate(operands):
            if operand is None:
                raise MissingOperandError(f"operands[{i}]")
        object.__setattr__(self, "_entity_type", common_entity_type(*operands))

    @property
    def entity_type(self) -> Any:  # noqa: ANN401
        return self._entity_type

    def _rebound(self) -> tuple[Var, tuple[Node, ...]]:
        return rebind([operand.to_symbolic() for operand in self.operands])


@dataclass(frozen=True, eq=False, kw_only=True)
class AllSpecification(NarySpecification[T_contra]):
    """Every operand holds. Folds into a left-deep ``And`` chain."""

    combinator: ClassVar[str] = "All"

    def to_symbolic(self) -> Lambda:
        param, bodies = self._rebound()
        return Lambda(param, reduce(And, bodies))

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return all(operand.is_satisfied_by(entity) for operand in self.operands)


@dataclass(frozen=True, eq=False, kw_only=True)
class AnyOfSpecification(NarySpecification[T_contra]):
    """At least one operand holds. Folds into a left-deep ``Or`` chain."""

    combinator: ClassVar[str] = "AnyOf"

    def to_symbolic(self) -> Lambda:
        param, bodies = self._rebound()
        return Lambda(param, reduce(Or, bodies))

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return any(operand.is_satisfied_by(entity) for operand in self.operands)


@dataclass(frozen=True, eq=False, kw_only=True)
class ThresholdSpecification(NarySpecification[T_contra], ABC):
    """
    Compare the number of satisfied operands with ``count``.

    The symbolic form sums ``Conditional(operand, 1, 0)`` over the operands, starting from ``Const(0)``, and compares
    the sum with ``count``. Evaluation is eager: every operand is evaluated, whatever the running tally.

    Raises:
        ThresholdOutOfRangeError: If ``count`` is outside ``[0, len(operands)]``.
    """

    comparison: ClassVar[CompareOp]

    count: int

    def __post_init__(self):
        super().__post_init__()
        if not 0 <= self.count <= len(self.operands):
            raise ThresholdOutOfRangeError(self.combinator, self.count, len(self.operands))

    def to_symbolic(self) -> Lambda:
        param, bodies = self._rebound()
        total: Node = Const(0)
        for body in bodies:
            total = Add(total, Conditional(body, Const(1), Const(0)))
        return Lambda(param, Compare(self.comparison, total, Const(self.count)))

    def is_satisfied_by(self, entity: T_contra) -> bool:
        satisfied = sum(1 for operand in self.operands if operand.is_satisfied_by(entity))
        return COMPARATORS[self.comparison](satisfied, self.count)


@dataclass(frozen=True, eq=False, kw_only=True)
class ExactlySpecification(ThresholdSpecification[T_contra]):
    combinator: ClassVar[str] = "Exactly"
    comparison: ClassVar[CompareOp] = "=="


@dataclass(frozen=True, eq=False, kw_only=True)
class AtLeastSpecification(ThresholdSpecification[T_contra]):
    combinator: ClassVar[str] = "AtLeast"
    comparison: ClassVar[CompareOp] = ">="


@dataclass(frozen=True, eq=False, kw_only=True)
class AtMostSpecification(ThresholdSpecification[T_contra]):
    combinator: ClassVar[str] = "AtMost"
    comparison: ClassVar[CompareOp] = "<="


def all_of(*specs: Specification[T_contra]) -> Specification[T_contra]:
    """
    Satisfied when every one of ``specs`` is.
    """
    return AllSpecification(operands=specs)


def any_of(*specs: Specification[T_contra]) -> Specification[T_contra]:
    """
    Satisfied when at least one of ``specs`` is.
    """
    return AnyOfSpecification(operands=specs)


def none_of(*specs: Specification[T_contra]) -> Specification[T_contra]:
    """
    Satisfied when none of ``specs`` is.
    """
    return NotSpecification(operand=AnyOfSpecification(operands=specs))


def exactly(count: int, *specs: Specification[T_contra]) -> Specification[T_contra]:
    """
    Satisfied when exactly ``count`` of ``specs`` are.

    Examples:
        ```python
        two_of_three = exactly(2, expensive, electronics, low_stock)
        ```
    """
    return ExactlySpecification(operands=specs, count=count)


def at_least(count: int, *specs: Specification[T_contra]) -> Specification[T_contra]:
    return AtLeastSpecification(operands=specs, count=count)


def at_most(count: int, *specs: Specification[T_contra]) -> Specification[T_contra]:
    return AtMostSpecification(operands=specs, count=count)
