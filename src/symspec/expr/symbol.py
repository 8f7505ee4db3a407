from __future__ import annotations

from typing import Any

from symspec.expr.errs import NotASymbolError
from symspec.expr.nodes import Add, And, Call, Compare, Const, Item, Member, Node, Not, Or, is_node
from symspec.types import CompareOp


def as_node(value: Any) -> Node:  # noqa: ANN401
    """
    Lift ``value`` into a tree node. Symbols unwrap, nodes pass through, everything else becomes a constant.
    """
    if isinstance(value, Symbol):
        return value._node  # noqa: SLF001
    if is_node(value):
        return value
    return Const(value)


class Symbol:
    """
    Record the operations applied to it as a predicate tree.

    Attribute access, subscripts, method calls, comparisons, ``+`` and the bitwise ``&``, ``|``, ``~`` operators are
    captured; membership and identity tests, which Python cannot overload, are spelled as methods.
    Attributes of the entity that share a name with those methods are out of reach.

    Examples:
        ```python
        x = Symbol(Var("product"))
        tree = as_node((x.price > 200) & x.name.startswith("L"))
        ```
    """

    __slots__ = ("_node",)
    # Subscripts would otherwise make every symbol an endless iterable.
    __iter__ = None

    def __init__(self, node: Node):
        self._node = node

    def __repr__(self) -> str:
        return f"Symbol({self._node!r})"

    def __bool__(self) -> bool:
        msg = "A symbol has no truth value; combine conditions with &, | and ~ instead of and, or and not."
        raise NotASymbolError(msg)

    def __getattr__(self, name: str) -> Symbol:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return Symbol(Member(self._node, name))

    def __getitem__(self, key: Any) -> Symbol:  # noqa: ANN401
        return Symbol(Item(self._node, as_node(key)))

    def __call__(self, *args: Any, **kwargs: Any) -> Symbol:  # noqa: ANN401
        if not isinstance(self._node, Member):
            msg = "Only methods of the entity can be called on a symbol; wrap other callables with satisfies()."
            raise NotASymbolError(msg)
        return Symbol(
            Call(
                self._node.name,
                tuple(as_node(arg) for arg in args),
                tuple((name, as_node(value)) for name, value in kwargs.items()),
                target=self._node.target,
            ),
        )

    def _compare(self, op: CompareOp, other: Any) -> Symbol:  # noqa: ANN401
        return Symbol(Compare(op, self._node, as_node(other)))

    def __eq__(self, other: object) -> Symbol:  # ty:ignore[invalid-method-override]
        return self._compare("==", other)

    def __ne__(self, other: object) -> Symbol:  # ty:ignore[invalid-method-override]
        return self._compare("!=", other)

    def __lt__(self, other: Any) -> Symbol:  # noqa: ANN401
        return self._compare("<", other)

    def __le__(self, other: Any) -> Symbol:  # noqa: ANN401
        return self._compare("<=", other)

    def __gt__(self, other: Any) -> Symbol:  # noqa: ANN401
        return self._compare(">", other)

    def __ge__(self, other: Any) -> Symbol:  # noqa: ANN401
        return self._compare(">=", other)

    __hash__ = None  # ty:ignore[invalid-assignment]

    def __add__(self, other: Any) -> Symbol:  # noqa: ANN401
        return Symbol(Add(self._node, as_node(other)))

    def __radd__(self, other: Any) -> Symbol:  # noqa: ANN401
        return Symbol(Add(as_node(other), self._node))

    def __and__(self, other: Any) -> Symbol:  # noqa: ANN401
        return Symbol(And(self._node, as_node(other)))

    def __rand__(self, other: Any) -> Symbol:  # noqa: ANN401
        return Symbol(And(as_node(other), self._node))

    def __or__(self, other: Any) -> Symbol:  # noqa: ANN401
        return Symbol(Or(self._node, as_node(other)))

    def __ror__(self, other: Any) -> Symbol:  # noqa: ANN401
        return Symbol(Or(as_node(other), self._node))

    def __invert__(self) -> Symbol:
        return Symbol(Not(self._node))

    def in_(self, container: Any) -> Symbol:  # noqa: ANN401
        """``self in container``"""
        return self._compare("in", container)

    def not_in(self, container: Any) -> Symbol:  # noqa: ANN401
        """``self not in container``"""
        return self._compare("not in", container)

    def contains(self, item: Any) -> Symbol:  # noqa: ANN401
        """``item in self``"""
        return Symbol(Compare("in", as_node(item), self._node))

    def is_(self, other: Any) -> Symbol:  # noqa: ANN401
        """``self is other``"""
        return self._compare("is", other)

    def is_not(self, other: Any) -> Symbol:  # noqa: ANN401
        """``self is not other``"""
        return self._compare("is not", other)
