# ruff: noqa: C901
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any, Literal, TypeAlias, assert_never, final

from typing_extensions import TypeIs

from symspec.types import CompareOp, NodeType

COMPARE_OPS: tuple[CompareOp, ...] = ("==", "!=", "<", "<=", ">", ">=", "in", "not in", "is", "is not")


class Expr:
    """
    Base class for every node of a predicate tree.
    """

    __slots__ = ()

    node_type: NodeType


@dataclass(frozen=True, slots=True, eq=False)
@final
class Var(Expr):
    """
    The free variable of a predicate tree.

    Variables are compared by identity: two variables with the same name are still different variables.
    """

    name: str = "entity"
    entity_type: Any = field(default=None, repr=False)
    node_type: Literal["var"] = field(default="var", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class Const(Expr):
    """
    Literal operand.
    """

    value: Any
    node_type: Literal["const"] = field(default="const", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class Member(Expr):
    """
    Attribute access, ``target.name``.
    """

    target: Node
    name: str
    node_type: Literal["member"] = field(default="member", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class Item(Expr):
    """
    Subscript access, ``target[key]``.
    """

    target: Node
    key: Node
    node_type: Literal["item"] = field(default="item", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class Call(Expr):
    """
    Call of a method on ``target`` when it is set, otherwise call of the opaque callable ``func``.
    """

    func: str | Callable[..., Any]
    args: tuple[Node, ...] = ()
    kwargs: tuple[tuple[str, Node], ...] = ()
    target: Node | None = None
    node_type: Literal["call"] = field(default="call", init=False, repr=False)

    @property
    def func_name(self) -> str:
        """
        Name used when rendering the call.
        """
        if isinstance(self.func, str):
            return self.func
        return getattr(self.func, "__name__", repr(self.func))


@dataclass(frozen=True, slots=True)
@final
class Compare(Expr):
    """
    Leaf comparison between two operands.
    """

    op: CompareOp
    left: Node
    right: Node
    node_type: Literal["compare"] = field(default="compare", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class Add(Expr):
    """
    Arithmetic sum of two operands.
    """

    left: Node
    right: Node
    node_type: Literal["add"] = field(default="add", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class And(Expr):
    left: Node
    right: Node
    node_type: Literal["and"] = field(default="and", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class Or(Expr):
    left: Node
    right: Node
    node_type: Literal["or"] = field(default="or", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class Not(Expr):
    operand: Node
    node_type: Literal["not"] = field(default="not", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class Conditional(Expr):
    """
    Ternary node, ``if_true if test else if_false``.
    """

    test: Node
    if_true: Node
    if_false: Node
    node_type: Literal["conditional"] = field(default="conditional", init=False, repr=False)


@dataclass(frozen=True, slots=True)
@final
class Lambda(Expr):
    """
    Bind ``param`` over ``body``.

    The symbolic form of every specification is a lambda; nested lambdas describe element predicates.
    """

    param: Var
    body: Node
    node_type: Literal["lambda"] = field(default="lambda", init=False, repr=False)


Node: TypeAlias = Var | Const | Member | Item | Call | Compare | Add | And | Or | Not | Conditional | Lambda


def is_node(value: Any) -> TypeIs[Node]:  # noqa: ANN401
    """
    Check if the given object is a node of a predicate tree.
    """

    return isinstance(value, Expr)


def flatten_chain(node: Node, kind: type[And] | type[Or] | type[Add]) -> list[Node]:
    """
    Collect the operands of a chain of ``kind`` nodes, left to right.

    Works on left-deep, right-deep and mixed chains without recursion.
    """
    operands: list[Node] = []
    stack: list[Node] = [node]

    while stack:
        current = stack.pop()
        if type(current) is kind:
            stack.append(current.right)
            stack.append(current.left)
        else:
            operands.append(current)

    return operands


def children(node: Node) -> tuple[Node, ...]:
    """
    Child nodes of ``node`` in evaluation order. The parameter of a lambda is not a child.
    """
    match node:
        case Var() | Const():
            return ()
        case Member(target=target):
            return (target,)
        case Item(target=target, key=key):
            return (target, key)
        case Call(args=args, kwargs=kwargs, target=target):
            kw_values = tuple(value for _, value in kwargs)
            return (*args, *kw_values) if target is None else (*args, *kw_values, target)
        case Compare(left=left, right=right) | Add(left=left, right=right):
            return (left, right)
        case And(left=left, right=right) | Or(left=left, right=right):
            return (left, right)
        case Not(operand=operand):
            return (operand,)
        case Conditional(test=test, if_true=if_true, if_false=if_false):
            return (test, if_true, if_false)
        case Lambda(body=body):
            return (body,)
        case _:
            assert_never(node)


def with_children(node: Node, new_children: tuple[Node, ...]) -> Node:
    """
    Copy of ``node`` with its children replaced, in the order returned by [children][].
    """
    match node:
        case Var() | Const():
            return node
        case Member():
            return replace(node, target=new_children[0])
        case Item():
            return replace(node, target=new_children[0], key=new_children[1])
        case Call(args=args, kwargs=kwargs, target=target):
            n_args = len(args)
            n_kwargs = len(kwargs)
            new_kwargs = tuple(
                (name, value) for (name, _), value in zip(kwargs, new_children[n_args : n_args + n_kwargs], strict=True)
            )
            return replace(
                node,
                args=tuple(new_children[:n_args]),
                kwargs=new_kwargs,
                target=None if target is None else new_children[-1],
            )
        case Compare() | Add() | And() | Or():
            return replace(node, left=new_children[0], right=new_children[1])
        case Not():
            return replace(node, operand=new_children[0])
        case Conditional():
            return replace(node, test=new_children[0], if_true=new_children[1], if_false=new_children[2])
        case Lambda():
            return replace(node, body=new_children[0])
        case _:
            assert_never(node)


def label(node: Node) -> tuple[Any, ...]:
    """
    The non-node fields of ``node``, used for structural comparison.
    """
    match node:
        case Const(value=value):
            return (node.node_type, type(value), value)
        case Member(name=name):
            return (node.node_type, name)
        case Call(func=func, args=args, kwargs=kwargs, target=target):
            return (node.node_type, func, len(args), tuple(name for name, _ in kwargs), target is None)
        case Compare(op=op):
            return (node.node_type, op)
        case _:
            return (node.node_type,)
