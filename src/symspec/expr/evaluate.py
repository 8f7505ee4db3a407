from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from functools import reduce
from typing import Any, assert_never

from symspec.expr.errs import UnboundVariableError
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

COMPARATORS: dict[CompareOp, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda item, container: item in container,
    "not in": lambda item, container: item not in container,
    "is": operator.is_,
    "is not": operator.is_not,
}


def evaluate(node: Node, env: Mapping[Var, Any]) -> Any:  # noqa: ANN401, C901
    """
    Interpret ``node`` with the variables bound in ``env``.

    ``And`` and ``Or`` short-circuit like Python's ``and`` and ``or`` but always yield a bool. Chains of ``And``, ``Or``
    and ``Add`` are evaluated in one step, whatever their length. Errors raised while evaluating a leaf propagate
    unchanged.

    Raises:
        UnboundVariableError: If the tree references a variable missing from ``env``.
    """
    match node:
        case Var():
            try:
                return env[node]
            except KeyError:
                raise UnboundVariableError((node,)) from None
        case Const(value=value):
            return value
        case Member(target=target, name=name):
            return getattr(evaluate(target, env), name)
        case Item(target=target, key=key):
            return evaluate(target, env)[evaluate(key, env)]
        case Call(func=func, args=args, kwargs=kwargs, target=target):
            arg_values = [evaluate(arg, env) for arg in args]
            kwarg_values = {name: evaluate(value, env) for name, value in kwargs}
            fn = func if target is None else getattr(evaluate(target, env), func)  # ty:ignore[invalid-argument-type]
            return fn(*arg_values, **kwarg_values)
        case Compare(op=op, left=left, right=right):
            return COMPARATORS[op](evaluate(left, env), evaluate(right, env))
        case Add():
            return reduce(operator.add, (evaluate(operand, env) for operand in flatten_chain(node, Add)))
        case And():
            return all(evaluate(operand, env) for operand in flatten_chain(node, And))
        case Or():
            return any(evaluate(operand, env) for operand in flatten_chain(node, Or))
        case Not(operand=operand):
            return not evaluate(operand, env)
        case Conditional(test=test, if_true=if_true, if_false=if_false):
            return evaluate(if_true, env) if evaluate(test, env) else evaluate(if_false, env)
        case Lambda(param=param, body=body):
            return lambda value: evaluate(body, {**env, param: value})
        case _:
            assert_never(node)


def evaluate_lambda(lam: Lambda, entity: Any) -> bool:  # noqa: ANN401
    """
    Apply the symbolic predicate ``lam`` to ``entity``.
    """
    return bool(evaluate(lam.body, {lam.param: entity}))
