# ruff: noqa: C901
from __future__ import annotations

import ast
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, assert_never

from symspec.expr.functions import total
from symspec.expr.nodes import (
    Add,
    And,
    Call,
    Compare,
    Conditional,
    Const,
    Item,
    Lambda,
    Member,
    Node,
    Not,
    Or,
    Var,
    flatten_chain,
)
from symspec.types import CompareOp

if TYPE_CHECKING:
    from symspec.specification import Specification

logger = logging.getLogger(__name__)

COMPILED_PREDICATE = "_compiled_predicate"

_LITERAL_TYPES = (type(None), bool, int, float, complex, str, bytes)

_AST_COMPARE_OPS: dict[CompareOp, type[ast.cmpop]] = {
    "==": ast.Eq,
    "!=": ast.NotEq,
    "<": ast.Lt,
    "<=": ast.LtE,
    ">": ast.Gt,
    ">=": ast.GtE,
    "in": ast.In,
    "not in": ast.NotIn,
    "is": ast.Is,
    "is not": ast.IsNot,
}


class Compiler:
    """
    Compile a symbolic predicate into a Python function.

    The tree is lowered to a Python ``ast`` module defining one function of the bound variable, which is compiled
    and executed in a private namespace. Opaque callables and constants without a literal form are injected into
    that namespace by name.
    """

    def __init__(self):
        self._var_counter = 0
        self._var_names: dict[int, str] = {}
        self._context_counter = 0
        self._context: dict[str, Any] = {}

    def _var_name(self, var: Var) -> str:
        key = id(var)
        if key not in self._var_names:
            self._var_names[key] = f"_v{self._var_counter}"
            self._var_counter += 1
        return self._var_names[key]

    def _register(self, value: Any, prefix: str) -> ast.Name:  # noqa: ANN401
        name = f"_{prefix}{self._context_counter}"
        self._context_counter += 1
        self._context[name] = value
        return ast.Name(id=name, ctx=ast.Load())

    @staticmethod
    def _arguments(*names: str) -> ast.arguments:
        return ast.arguments(
            posonlyargs=[],
            args=[ast.arg(arg=name) for name in names],
            kwonlyargs=[],
            kw_defaults=[],
            defaults=[],
        )

    def _emit(self, node: Node) -> ast.expr:
        match node:
            case Var():
                return ast.Name(id=self._var_name(node), ctx=ast.Load())
            case Const(value=value):
                if type(value) in _LITERAL_TYPES:
                    return ast.Constant(value=value)
                return self._register(value, "c")
            case Member(target=target, name=name):
                return ast.Attribute(value=self._emit(target), attr=name, ctx=ast.Load())
            case Item(target=target, key=key):
                return ast.Subscript(value=self._emit(target), slice=self._emit(key), ctx=ast.Load())
            case Call(func=func, args=args, kwargs=kwargs, target=target):
                if target is None:
                    func_expr: ast.expr = self._register(func, "f")
                else:
                    func_expr = ast.Attribute(value=self._emit(target), attr=func, ctx=ast.Load())
                return ast.Call(
                    func=func_expr,
                    args=[self._emit(arg) for arg in args],
                    keywords=[ast.keyword(arg=name, value=self._emit(value)) for name, value in kwargs],
                )
            case Compare(op=op, left=left, right=right):
                return ast.Compare(left=self._emit(left), ops=[_AST_COMPARE_OPS[op]()], comparators=[self._emit(right)])
            case Add():
                operands = [self._emit(operand) for operand in flatten_chain(node, Add)]
                if len(operands) == 2:  # noqa: PLR2004
                    return ast.BinOp(left=operands[0], op=ast.Add(), right=operands[1])
                # A flat call keeps long sums out of the nesting limit of the bytecode compiler.
                return ast.Call(func=self._register(total, "f"), args=operands, keywords=[])
            case And():
                return ast.BoolOp(op=ast.And(), values=[self._emit(operand) for operand in flatten_chain(node, And)])
            case Or():
                return ast.BoolOp(op=ast.Or(), values=[self._emit(operand) for operand in flatten_chain(node, Or)])
            case Not(operand=operand):
                return ast.UnaryOp(op=ast.Not(), operand=self._emit(operand))
            case Conditional(test=test, if_true=if_true, if_false=if_false):
                return ast.IfExp(test=self._emit(test), body=self._emit(if_true), orelse=self._emit(if_false))
            case Lambda(param=param, body=body):
                return ast.Lambda(args=self._arguments(self._var_name(param)), body=self._emit(body))
            case _:
                assert_never(node)

    @staticmethod
    def _locate(module: ast.Module) -> None:
        # Generated code has no source; every node sits at line 1. ast.walk does not recurse.
        for node in ast.walk(module):
            node.lineno = node.end_lineno = 1  # ty:ignore[invalid-assignment]
            node.col_offset = node.end_col_offset = 0  # ty:ignore[invalid-assignment]

    # noinspection D
    def compile(self, lam: Lambda) -> Callable[[Any], bool]:  # noqa: D102
        body_expr = ast.Call(func=ast.Name(id="bool", ctx=ast.Load()), args=[self._emit(lam.body)], keywords=[])
        func_def = ast.FunctionDef(
            name=COMPILED_PREDICATE,
            args=self._arguments(self._var_name(lam.param)),
            body=[ast.Return(value=body_expr)],
            decorator_list=[],
            type_params=[],
        )
        module = ast.Module(body=[func_def], type_ignores=[])

        self._locate(module)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Compiling predicate: %s", ast.unparse(module))

        code_obj = compile(module, filename="<symspec>", mode="exec")
        exec(code_obj, self._context)  # noqa: S102

        return self._context[COMPILED_PREDICATE]


def compile_lambda(lam: Lambda) -> Callable[[Any], bool]:
    """
    Compile a symbolic predicate with a fresh [Compiler][].
    """
    return Compiler().compile(lam)


def compile_specification(spec: Specification[Any]) -> Callable[[Any], bool]:
    """
    Compile the symbolic form of ``spec`` into a plain Python function.
    """
    return compile_lambda(spec.to_symbolic())
