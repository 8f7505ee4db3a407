from __future__ import annotations

from typing import TYPE_CHECKING, Any, assert_never

from symspec.diagnostics.result import EvaluationDetail, EvaluationResult
from symspec.expr.evaluate import COMPARATORS, evaluate
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
    children,
    is_node,
)

if TYPE_CHECKING:
    from symspec.diagnostics.style import TraceStyle
    from symspec.specification import Specification


def _as_lambda(subject: Specification | Lambda) -> Lambda:
    return subject if isinstance(subject, Lambda) else subject.to_symbolic()


def _render_const(value: Any) -> str:  # noqa: ANN401
    return repr(value) if isinstance(value, str) else str(value)


def _sub_nodes(node: Node) -> tuple[Node, ...]:
    # Attributes of the bound variable render as bare names, without their target.
    match node:
        case Member(target=Var()) | Item(target=Var(), key=Const(value=str())):
            return ()
        case _:
            return children(node)


def _grouped(operand: Node, text: str) -> str:
    return f"({text})" if isinstance(operand, Compare | And | Or) else text


def _render(node: Node, parts: list[str]) -> str:  # noqa: C901
    match node:
        case Var(name=name):
            return name
        case Const(value=value):
            return _render_const(value)
        case Member(target=Var(), name=name):
            return name
        case Member(name=name):
            return f"{parts[0]}.{name}"
        case Item(target=Var(), key=Const(value=str() as key)):
            return key
        case Item():
            return f"{parts[0]}[{parts[1]}]"
        case Call(args=args, kwargs=kwargs, target=target):
            n_args = len(args)
            rendered = parts[:n_args]
            rendered.extend(
                f"{name}={text}" for (name, _), text in zip(kwargs, parts[n_args : n_args + len(kwargs)], strict=True)
            )
            call = f"{node.func_name}({', '.join(rendered)})"
            return call if target is None else f"{parts[-1]}.{call}"
        case Compare(op=op, left=left, right=right):
            return f"{_grouped(left, parts[0])} {op} {_grouped(right, parts[1])}"
        case Add(left=left, right=right):
            right_text = f"({parts[1]})" if isinstance(right, Add) else _grouped(right, parts[1])
            return f"{_grouped(left, parts[0])} + {right_text}"
        case And():
            return f"({parts[0]}) AND ({parts[1]})"
        case Or():
            return f"({parts[0]}) OR ({parts[1]})"
        case Not():
            return f"NOT ({parts[0]})"
        case Conditional():
            return f"IF ({parts[0]}) THEN {parts[1]} ELSE {parts[2]}"
        case Lambda(param=param):
            return f"lambda {param.name}: {parts[0]}"
        case _:
            assert_never(node)


def explain(subject: Specification | Node) -> str:
    """
    Render a predicate tree as text, without evaluating anything.

    A specification is rendered through the body of its symbolic form. Attributes of the bound variable render as
    their bare name. A comparison or boolean operand of a comparison or a sum is parenthesized. The tree is walked
    with an explicit stack, so its depth is not bounded by the recursion limit.

    Examples:
        ```python
        spec = where(lambda p: (p.price > 200) & ~(p.category == "Furniture"))
        assert explain(spec) == "(price > 200) AND (NOT (category == 'Furniture'))"
        ```
    """
    root = subject if is_node(subject) else subject.to_symbolic().body

    texts: list[str] = []
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        sub_nodes = _sub_nodes(node)
        if sub_nodes and not expanded:
            stack.append((node, True))
            stack.extend((sub_node, False) for sub_node in reversed(sub_nodes))
            continue

        start = len(texts) - len(sub_nodes)
        parts = texts[start:]
        del texts[start:]
        texts.append(_render(node, parts))

    return texts.pop()


def evaluate_with_trace(
    subject: Specification | Lambda,
    entity: Any,  # noqa: ANN401
    *,
    short_circuit: bool = False,
) -> tuple[bool, tuple[EvaluationDetail, ...]]:
    """
    Evaluate ``subject`` against ``entity`` and record one detail per evaluated condition.

    ``And`` and ``Or`` contribute no entry of their own; ``Not`` negates its operand and adds nothing. Every other node
    is evaluated as a whole and contributes exactly one entry, in left to right order. Errors raised by a leaf
    propagate unchanged.

    Args:
        subject: Specification or symbolic predicate to evaluate.
        entity: The candidate.
        short_circuit: Skip, and leave out of the trace, the right side of an ``And``/``Or`` once the left side
            decides the result. By default both sides are always evaluated.

    Returns:
        The overall result and the trace.
    """
    lam = _as_lambda(subject)
    env = {lam.param: entity}
    details: list[EvaluationDetail] = []

    # Each frame is a node and how many of its operands are already decided; outcomes stack up in ``results``.
    results: list[bool] = []
    stack: list[tuple[Node, int]] = [(lam.body, 0)]
    while stack:
        node, done = stack.pop()
        match node:
            case And(left=left, right=right) | Or(left=left, right=right):
                if done == 0:
                    stack.append((node, 1))
                    stack.append((left, 0))
                elif done == 1:
                    decided = results[-1] if isinstance(node, Or) else not results[-1]
                    if short_circuit and decided:
                        continue
                    stack.append((node, 2))
                    stack.append((right, 0))
                else:
                    right_passed = results.pop()
                    left_passed = results.pop()
                    both = left_passed and right_passed
                    results.append(both if isinstance(node, And) else left_passed or right_passed)
            case Not(operand=operand):
                if done == 0:
                    stack.append((node, 1))
                    stack.append((operand, 0))
                else:
                    results.append(not results.pop())
            case Compare(op=op, left=left, right=right):
                actual = evaluate(left, env)
                passed = bool(COMPARATORS[op](actual, evaluate(right, env)))
                details.append(
                    EvaluationDetail(condition=explain(node), passed=passed, actual=None if passed else actual),
                )
                results.append(passed)
            case _:
                passed = bool(evaluate(node, env))
                details.append(EvaluationDetail(condition=explain(node), passed=passed))
                results.append(passed)

    return results.pop(), tuple(details)


def evaluation_result(
    subject: Specification | Lambda,
    entity: Any,  # noqa: ANN401
    *,
    short_circuit: bool = False,
) -> EvaluationResult:
    """
    [evaluate_with_trace][] wrapped into an [EvaluationResult][].
    """
    passed, details = evaluate_with_trace(subject, entity, short_circuit=short_circuit)
    return EvaluationResult(is_satisfied=passed, details=details)


def detailed_result(
    subject: Specification | Lambda,
    entity: Any,  # noqa: ANN401
    *,
    style: TraceStyle | None = None,
) -> str:
    """
    Evaluate ``subject`` against ``entity`` and render the outcome.
    """
    return evaluation_result(subject, entity).render(style)


class SpecificationExplainer:
    """
    Bundle the diagnostic operations of one specification.
    """

    def __init__(self, subject: Specification | Lambda, *, short_circuit: bool = False):
        self.expression = _as_lambda(subject)
        self.short_circuit = short_circuit

    def explain(self) -> str:
        return explain(self.expression.body)

    def evaluate(self, entity: Any) -> EvaluationResult:  # noqa: ANN401
        return evaluation_result(self.expression, entity, short_circuit=self.short_circuit)
