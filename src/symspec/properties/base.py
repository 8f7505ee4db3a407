from __future__ import annotations

from abc import ABC
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from symspec.expr.nodes import Lambda, Node, Var
from symspec.expr.symbol import Symbol, as_node
from symspec.specification import ExpressionSpecification, Specification, is_specification

T_contra = TypeVar("T_contra", contravariant=True)

ElementPredicate = Callable[[Symbol], Any] | Specification[Any]


class PropertyAccessor(Generic[T_contra], ABC):
    """
    A selected path inside the entity, such as ``entity.customer.name``, from which leaves are generated.

    Helper mixins reach the path only through [param][] and [path][].
    """

    def __init__(self, param: Var, path: Node):
        self._param = param
        self._path = path

    @classmethod
    def select(
        cls,
        selector: Callable[[Symbol], Any],
        *,
        entity_type: Any = None,  # noqa: ANN401
        name: str = "entity",
        **kwargs: Any,  # noqa: ANN401
    ) -> Any:  # noqa: ANN401
        """
        Build the accessor from a selector written against a symbol, e.g. ``lambda p: p.price``.
        """
        param = Var(name, entity_type)
        return cls(param, as_node(selector(Symbol(param))), **kwargs)

    @property
    def param(self) -> Var:
        """The variable standing for the entity."""
        return self._param

    @property
    def path(self) -> Node:
        """The selected path, as a tree over [param][]."""
        return self._path

    def _build(self, body: Node) -> Specification[T_contra]:
        return ExpressionSpecification(expression=Lambda(self._param, body))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._path!r})"


def element_lambda(predicate: ElementPredicate, name: str = "item") -> Lambda:
    """
    The symbolic form of a predicate over one element, written against a symbol or given as a specification.
    """
    if is_specification(predicate):
        return predicate.to_symbolic()
    param = Var(name)
    return Lambda(param, as_node(predicate(Symbol(param))))
