from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from typing_extensions import TypeIs

from symspec.diagnostics.explainer import detailed_result, evaluation_result, explain
from symspec.expr.errs import UnboundVariableError
from symspec.expr.evaluate import evaluate_lambda
from symspec.expr.nodes import And, Call, Const, Lambda, Node, Not, Or, Var
from symspec.expr.substitute import free_variables, most_derived_type, rebind
from symspec.expr.symbol import Symbol, as_node
from symspec.specification.errs import MissingOperandError

if TYPE_CHECKING:
    from symspec.diagnostics.result import EvaluationResult
    from symspec.diagnostics.style import TraceStyle
    from symspec.performance import CachedSpecification, MemoizedSpecification
    from symspec.specification.pipeline import ConditionalSpecificationBuilder

T_contra = TypeVar("T_contra", contravariant=True)

DEFAULT_PARAM_NAME = "entity"


@dataclass(frozen=True, eq=False)
class Specification(Generic[T_contra], ABC):
    """
    Base class of all specifications.

    A specification is a named predicate over one entity type. It can be evaluated directly, and it can hand out its
    symbolic form, a [Lambda][symspec.expr.Lambda] bound to one fresh variable, for explanation, compilation or
    translation by an external query engine. Specifications are immutable; every combinator returns a new one.
    """

    @abstractmethod
    def to_symbolic(self) -> Lambda:
        """
        The predicate tree of this specification, bound to its free variable.
        """

    def is_satisfied_by(self, entity: T_contra) -> bool:
        """
        Evaluate the specification against ``entity``. Errors raised by a leaf propagate unchanged.
        """
        return evaluate_lambda(self.to_symbolic(), entity)

    @property
    def entity_type(self) -> Any:  # noqa: ANN401
        """
        Entity type declared on the free variable, ``None`` when untyped.
        """
        return self.to_symbolic().param.entity_type

    def __call__(self, entity: T_contra, /) -> bool:
        return self.is_satisfied_by(entity)

    def __and__(self, other: Specification[T_contra]) -> Specification[T_contra]:
        if not is_specification(other):
            return NotImplemented
        return AndSpecification(left=self, right=other)

    def __or__(self, other: Specification[T_contra]) -> Specification[T_contra]:
        if not is_specification(other):
            return NotImplemented
        return OrSpecification(left=self, right=other)

    def __xor__(self, other: Specification[T_contra]) -> Specification[T_contra]:
        if not is_specification(other):
            return NotImplemented
        return XorSpecification(left=self, right=other)

    def __invert__(self) -> Specification[T_contra]:
        return NotSpecification(operand=self)

    def and_(self, other: Specification[T_contra]) -> Specification[T_contra]:
        return AndSpecification(left=self, right=other)

    def or_(self, other: Specification[T_contra]) -> Specification[T_contra]:
        return OrSpecification(left=self, right=other)

    def not_(self) -> Specification[T_contra]:
        return NotSpecification(operand=self)

    def and_not(self, other: Specification[T_contra]) -> Specification[T_contra]:
        return AndNotSpecification(left=self, right=other)

    def xor(self, other: Specification[T_contra]) -> Specification[T_contra]:
        return XorSpecification(left=self, right=other)

    def implies(self, other: Specification[T_contra]) -> Specification[T_contra]:
        return ImpliesSpecification(left=self, right=other)

    def iff(self, other: Specification[T_contra]) -> Specification[T_contra]:
        return IffSpecification(left=self, right=other)

    def nand(self, other: Specification[T_contra]) -> Specification[T_contra]:
        return NandSpecification(left=self, right=other)

    def nor(self, other: Specification[T_contra]) -> Specification[T_contra]:
        return NorSpecification(left=self, right=other)

    # Diagnostics

    def explain(self) -> str:
        """
        Render the predicate tree as text.
        """
        return explain(self)

    def evaluate(self, entity: T_contra, *, short_circuit: bool = False) -> EvaluationResult:
        """
        Evaluate with a trace of every condition. See [symspec.diagnostics.evaluate_with_trace][].
        """
        return evaluation_result(self, entity, short_circuit=short_circuit)

    def detailed_result(self, entity: T_contra, *, style: TraceStyle | None = None) -> str:
        return detailed_result(self, entity, style=style)

    # Performance

    def cached(self) -> CachedSpecification[T_contra]:
        from symspec.performance import cached  # noqa: PLC0415

        return cached(self)

    def memoized(self) -> MemoizedSpecification[T_contra]:
        from symspec.performance import memoized  # noqa: PLC0415

        return memoized(self)

    def compile(self) -> Callable[[T_contra], bool]:
        """
        Compile the symbolic form into a plain Python function.
        """
        from symspec.compiler import compile_specification  # noqa: PLC0415

        return compile_specification(self)

    # Pipeline

    def when(
        self,
        condition: Callable[[T_contra], bool] | Specification[T_contra],
        then: Specification[T_contra],
    ) -> ConditionalSpecificationBuilder[T_contra]:
        """
        Require this specification and, whenever ``condition`` holds for the entity, ``then`` as well.

        Complete the result with ``otherwise``, ``otherwise_pass`` or ``otherwise_fail``.
        """
        from symspec.specification.pipeline import ConditionalSpecificationBuilder  # noqa: PLC0415

        return ConditionalSpecificationBuilder(self, condition, then)

    def only_when(self, condition: bool | Callable[[], bool]) -> Specification[T_contra]:  # noqa: FBT001
        """
        This specification if ``condition`` holds now, otherwise a specification that accepts everything.
        """
        enabled = condition() if callable(condition) else condition
        return self if enabled else AnySpecification()

    def skip_when(self, condition: bool | Callable[[], bool]) -> Specification[T_contra]:  # noqa: FBT001
        skipped = condition() if callable(condition) else condition
        return AnySpecification() if skipped else self

    def or_else(self, factory: SpecificationFactory[T_contra]) -> Specification[T_contra]:
        """
        OR with a specification that ``factory`` only builds when this one is not satisfied.
        """
        from symspec.specification.pipeline import LazyOrSpecification  # noqa: PLC0415

        return LazyOrSpecification(first=self, second_factory=factory)

    def and_then(self, factory: SpecificationFactory[T_contra]) -> Specification[T_contra]:
        """
        AND with a specification that ``factory`` only builds when this one is satisfied.
        """
        from symspec.specification.pipeline import LazyAndSpecification  # noqa: PLC0415

        return LazyAndSpecification(first=self, second_factory=factory)

    def chain(self, *others: Specification[T_contra]) -> Specification[T_contra]:
        result: Specification[T_contra] = self
        for other in others:
            result = result.and_(other)
        return result


SpecificationFactory = Callable[[], Specification[T_contra]]


def is_specification(s: Any) -> TypeIs[Specification]:  # noqa: ANN401
    """
    Check if the given object is a specification.
    """

    return isinstance(s, Specification)


def common_entity_type(*specs: Specification[Any]) -> Any:  # noqa: ANN401
    """
    The most derived entity type of ``specs``.

    Raises:
        EntityTypeMismatchError: If two of the specifications are declared over unrelated entity types.
    """
    return most_derived_type(*(spec.entity_type for spec in specs))


@dataclass(frozen=True, eq=False, kw_only=True)
class ExpressionSpecification(Specification[T_contra]):
    """
    Specification defined by a prebuilt predicate tree.

    Raises:
        UnboundVariableError: If the tree references a variable other than its own parameter.
    """

    expression: Lambda

    def __post_init__(self):
        if self.expression is None:
            raise MissingOperandError("expression")
        unbound = free_variables(self.expression)
        if unbound:
            raise UnboundVariableError(unbound)

    def to_symbolic(self) -> Lambda:
        return self.expression

    @property
    def entity_type(self) -> Any:  # noqa: ANN401
        return self.expression.param.entity_type


@dataclass(frozen=True, eq=False)
class AnySpecification(Specification[T_contra]):
    """Satisfied by every entity."""

    def to_symbolic(self) -> Lambda:
        return Lambda(Var(DEFAULT_PARAM_NAME), Const(True))

    def is_satisfied_by(self, entity: T_contra) -> bool:  # noqa: ARG002
        return True


@dataclass(frozen=True, eq=False)
class NoneSpecification(Specification[T_contra]):
    """Satisfied by no entity."""

    def to_symbolic(self) -> Lambda:
        return Lambda(Var(DEFAULT_PARAM_NAME), Const(False))

    def is_satisfied_by(self, entity: T_contra) -> bool:  # noqa: ARG002
        return False


def where(
    fn: Callable[[Symbol], Any],
    *,
    entity_type: Any = None,  # noqa: ANN401
    name: str = DEFAULT_PARAM_NAME,
) -> Specification[Any]:
    """
    Build a specification from a function written against a [Symbol][symspec.expr.Symbol].

    ``fn`` is called once, at construction, with a symbol standing for the entity; the operations it applies are
    recorded as the predicate tree.

    Examples:
        ```python
        expensive = where(lambda p: p.price > 200)
        assert expensive(Product(price=999))
        assert expensive.explain() == "price > 200"
        ```
    """
    param = Var(name, entity_type)
    return ExpressionSpecification(expression=Lambda(param, as_node(fn(Symbol(param)))))


def satisfies(
    fn: Callable[..., bool],
    *args: Any,  # noqa: ANN401
    entity_type: Any = None,  # noqa: ANN401
    **kwargs: Any,  # noqa: ANN401
) -> Specification[Any]:
    """
    Build a specification from an opaque Python predicate ``fn(entity, *args, **kwargs)``.

    The tree is a single call leaf, so it can be evaluated, explained and compiled, but not translated by a query
    engine that does not know ``fn``.
    """
    param = Var(DEFAULT_PARAM_NAME, entity_type)
    call = Call(
        fn,
        (param, *(as_node(arg) for arg in args)),
        tuple((key, as_node(value)) for key, value in kwargs.items()),
    )
    return ExpressionSpecification(expression=Lambda(param, call))


@dataclass(frozen=True, eq=False, kw_only=True)
class UnarySpecification(Specification[T_contra], ABC):
    operand: Specification[T_contra]

    def __post_init__(self):
        if self.operand is None:
            raise MissingOperandError("operand")

    @property
    def entity_type(self) -> Any:  # noqa: ANN401
        return self.operand.entity_type


@dataclass(frozen=True, eq=False, kw_only=True)
class NotSpecification(UnarySpecification[T_contra]):
    def to_symbolic(self) -> Lambda:
        param, (body,) = rebind([self.operand.to_symbolic()])
        return Lambda(param, Not(body))

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return not self.operand.is_satisfied_by(entity)


@dataclass(frozen=True, eq=False, kw_only=True)
class CompositeSpecification(Specification[T_contra], ABC):
    """
    Binary combinator. Both operands are rebound onto one shared variable before their trees are combined.

    A run of nested combinators of the same kind, such as the result of folding many specifications with ``&``, is
    walked with an explicit stack, so long runs do not grow the Python call stack.

    Raises:
        MissingOperandError: If an operand is None.
        EntityTypeMismatchError: If the operands are declared over unrelated entity types.
    """

    left: Specification[T_contra]
    right: Specification[T_contra]

    _entity_type: Any = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if self.left is None:
            raise MissingOperandError("left")
        if self.right is None:
            raise MissingOperandError("right")
        object.__setattr__(self, "_entity_type", common_entity_type(self.left, self.right))

    @property
    def entity_type(self) -> Any:  # noqa: ANN401
        return self._entity_type

    @abstractmethod
    def _combine(self, a: Node, b: Node) -> Node: ...

    def _run(self) -> tuple[list[Specification[T_contra]], list[Specification[T_contra] | None]]:
        """
        Operands of the same-kind run rooted here, left to right, and the run in postfix order, where ``None``
        stands for one combination step.
        """
        kind = type(self)
        operands: list[Specification[T_contra]] = []
        postfix: list[Specification[T_contra] | None] = []
        stack: list[tuple[Specification[T_contra], bool]] = [(self, False)]

        while stack:
            current, expanded = stack.pop()
            if expanded:
                postfix.append(None)
            elif type(current) is kind:
                stack.append((current, True))
                stack.append((current.right, False))  # ty:ignore[unresolved-attribute]
                stack.append((current.left, False))  # ty:ignore[unresolved-attribute]
            else:
                operands.append(current)
                postfix.append(current)

        return operands, postfix

    def to_symbolic(self) -> Lambda:
        operands, postfix = self._run()
        param, bodies = rebind([operand.to_symbolic() for operand in operands])

        pending = iter(bodies)
        built: list[Node] = []
        for step in postfix:
            if step is None:
                b = built.pop()
                a = built.pop()
                built.append(self._combine(a, b))
            else:
                built.append(next(pending))

        return Lambda(param, built.pop())


@dataclass(frozen=True, eq=False, kw_only=True)
class AndSpecification(CompositeSpecification[T_contra]):
    def _combine(self, a: Node, b: Node) -> Node:
        return And(a, b)

    def is_satisfied_by(self, entity: T_contra) -> bool:
        operands, _ = self._run()
        return all(operand.is_satisfied_by(entity) for operand in operands)


@dataclass(frozen=True, eq=False, kw_only=True)
class OrSpecification(CompositeSpecification[T_contra]):
    def _combine(self, a: Node, b: Node) -> Node:
        return Or(a, b)

    def is_satisfied_by(self, entity: T_contra) -> bool:
        operands, _ = self._run()
        return any(operand.is_satisfied_by(entity) for operand in operands)


@dataclass(frozen=True, eq=False, kw_only=True)
class AndNotSpecification(CompositeSpecification[T_contra]):
    def _combine(self, a: Node, b: Node) -> Node:
        return And(a, Not(b))

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return self.left.is_satisfied_by(entity) and not self.right.is_satisfied_by(entity)


@dataclass(frozen=True, eq=False, kw_only=True)
class XorSpecification(CompositeSpecification[T_contra]):
    """Exactly one of the operands holds. Both operands are always evaluated."""

    def _combine(self, a: Node, b: Node) -> Node:
        return Or(And(a, Not(b)), And(Not(a), b))

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return self.left.is_satisfied_by(entity) != self.right.is_satisfied_by(entity)


@dataclass(frozen=True, eq=False, kw_only=True)
class ImpliesSpecification(CompositeSpecification[T_contra]):
    def _combine(self, a: Node, b: Node) -> Node:
        return Or(Not(a), b)

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return not self.left.is_satisfied_by(entity) or self.right.is_satisfied_by(entity)


@dataclass(frozen=True, eq=False, kw_only=True)
class IffSpecification(CompositeSpecification[T_contra]):
    """Both operands agree. Both operands are always evaluated."""

    def _combine(self, a: Node, b: Node) -> Node:
        return Or(And(a, b), And(Not(a), Not(b)))

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return self.left.is_satisfied_by(entity) == self.right.is_satisfied_by(entity)


@dataclass(frozen=True, eq=False, kw_only=True)
class NandSpecification(CompositeSpecification[T_contra]):
    def _combine(self, a: Node, b: Node) -> Node:
        return Not(And(a, b))

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return not (self.left.is_satisfied_by(entity) and self.right.is_satisfied_by(entity))


@dataclass(frozen=True, eq=False, kw_only=True)
class NorSpecification(CompositeSpecification[T_contra]):
    def _combine(self, a: Node, b: Node) -> Node:
        return Not(Or(a, b))

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return not (self.left.is_satisfied_by(entity) or self.right.is_satisfied_by(entity))
