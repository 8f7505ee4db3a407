from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from symspec.expr.errs import EntityTypeMismatchError
from symspec.expr.nodes import Lambda, Node, Var, children, label, with_children


def substitute(node: Node, old: Var, new: Node) -> Node:
    """
    Replace every occurrence of ``old`` in ``node`` with ``new``.

    The input is never modified. Subtrees without an occurrence are shared with the input, and when ``old`` does not
    occur at all the input itself is returned. A nested lambda that binds ``old`` shadows it.

    Raises:
        EntityTypeMismatchError: If ``new`` is a variable whose entity type is unrelated to the one of ``old``.
    """
    if new is old:
        return node
    if isinstance(new, Var):
        most_derived_type(old.entity_type, new.entity_type)

    stack: list[tuple[Node, bool]] = [(node, False)]
    results: list[Node] = []

    while stack:
        current, visited = stack.pop()
        if visited:
            count = len(children(current))
            new_children = tuple(results[-count:])
            del results[-count:]
            if all(a is b for a, b in zip(new_children, children(current), strict=True)):
                results.append(current)
            else:
                results.append(with_children(current, new_children))
            continue

        if isinstance(current, Var):
            results.append(new if current is old else current)
            continue
        if isinstance(current, Lambda) and current.param is old:
            results.append(current)
            continue

        sub_nodes = children(current)
        if not sub_nodes:
            results.append(current)
            continue

        stack.append((current, True))
        stack.extend((child, False) for child in reversed(sub_nodes))

    return results.pop()


def free_variables(node: Node) -> frozenset[Var]:
    """
    Variables referenced by ``node`` that no lambda inside ``node`` binds.
    """
    found: set[Var] = set()
    stack: list[tuple[Node, frozenset[Var]]] = [(node, frozenset())]

    while stack:
        current, bound = stack.pop()
        if isinstance(current, Var):
            if current not in bound:
                found.add(current)
            continue
        if isinstance(current, Lambda):
            bound = bound | {current.param}
        stack.extend((child, bound) for child in children(current))

    return frozenset(found)


def _is_subtype(candidate: Any, base: Any) -> bool:  # noqa: ANN401
    if candidate is base or candidate == base:
        return True
    try:
        return issubclass(candidate, base)
    except TypeError:
        # TypedDict, generic aliases and other non-class annotations
        return False


def most_derived_type(*entity_types: Any) -> Any:  # noqa: ANN401
    """
    The most derived of the given entity types, ``None`` entries are ignored.

    Raises:
        EntityTypeMismatchError: If two of the types are unrelated.
    """
    result = None
    for entity_type in entity_types:
        if entity_type is None:
            continue
        if result is None or _is_subtype(entity_type, result):
            result = entity_type
        elif not _is_subtype(result, entity_type):
            raise EntityTypeMismatchError(result, entity_type)
    return result


def unify_variables(*params: Var) -> Var:
    """
    A fresh variable able to stand in for every one of ``params``.
    """
    name = params[0].name if params else "entity"
    return Var(name, most_derived_type(*(p.entity_type for p in params)))


def rebind(lambdas: Sequence[Lambda]) -> tuple[Var, tuple[Node, ...]]:
    """
    Move the bodies of ``lambdas`` onto one shared fresh variable.

    Returns:
        The shared variable and the rebound bodies, in input order.
    """
    param = unify_variables(*(lam.param for lam in lambdas))
    bodies = tuple(substitute(lam.body, lam.param, param) for lam in lambdas)
    return param, bodies


def equivalent(a: Node, b: Node) -> bool:
    """
    Structural equality up to the renaming of lambda parameters.
    """
    mapping: dict[Var, Var] = {}
    stack: list[tuple[Node, Node]] = [(a, b)]

    while stack:
        x, y = stack.pop()
        if type(x) is not type(y):
            return False
        if isinstance(x, Var):
            if mapping.get(x, x) is not y:
                return False
            continue
        if isinstance(x, Lambda):
            mapping[x.param] = y.param  # ty:ignore[unresolved-attribute]
        elif label(x) != label(y):
            return False

        x_children, y_children = children(x), children(y)
        if len(x_children) != len(y_children):
            return False
        stack.extend(zip(x_children, y_children, strict=True))

    return True
