from __future__ import annotations

from typing import TypeVar

from symspec.expr.nodes import And, Call, Compare, Conditional, Const, Node, Not
from symspec.properties.base import PropertyAccessor
from symspec.specification import Specification

T_contra = TypeVar("T_contra", contravariant=True)


class StringMixin(PropertyAccessor[T_contra]):
    """
    Text operators on the selected path.

    Case-insensitive operators compare ``str.casefold`` forms. Checks that accept ``None`` guard the text operation
    with a conditional, so they are safe under a trace that evaluates every condition.
    """

    def _method(self, name: str, *args: Node) -> Call:
        return Call(name, args, target=self.path)

    def _none_or(self, otherwise: Node) -> Node:
        return Conditional(Compare("is", self.path, Const(None)), Const(True), otherwise)

    def _length(self) -> Call:
        return Call(len, (self.path,))

    def starts_with(self, prefix: str) -> Specification[T_contra]:
        return self._build(self._method("startswith", Const(prefix)))

    def ends_with(self, suffix: str) -> Specification[T_contra]:
        return self._build(self._method("endswith", Const(suffix)))

    def contains(self, substring: str) -> Specification[T_contra]:
        return self._build(Compare("in", Const(substring), self.path))

    def equals_ignore_case(self, value: str) -> Specification[T_contra]:
        return self._build(Compare("==", self._method("casefold"), Const(value.casefold())))

    def contains_ignore_case(self, substring: str) -> Specification[T_contra]:
        return self._build(Compare("in", Const(substring.casefold()), self._method("casefold")))

    def is_none_or_empty(self) -> Specification[T_contra]:
        return self._build(self._none_or(Compare("==", self.path, Const(""))))

    def is_not_none_or_empty(self) -> Specification[T_contra]:
        return self._build(Not(self._none_or(Compare("==", self.path, Const("")))))

    def is_none_or_whitespace(self) -> Specification[T_contra]:
        return self._build(self._none_or(Compare("==", self._method("strip"), Const(""))))

    def has_content(self) -> Specification[T_contra]:
        """Not None and not only whitespace."""
        return self._build(Not(self._none_or(Compare("==", self._method("strip"), Const("")))))

    def has_length(self, length: int) -> Specification[T_contra]:
        return self._build(Compare("==", self._length(), Const(length)))

    def has_length_between(self, minimum: int, maximum: int) -> Specification[T_contra]:
        return self._build(
            And(Compare(">=", self._length(), Const(minimum)), Compare("<=", self._length(), Const(maximum))),
        )
