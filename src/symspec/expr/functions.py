"""
Callables that leaves and compiled predicates embed as calls.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable
from functools import reduce
from typing import Any


def any_match(items: Iterable[Any], predicate: Callable[[Any], Any]) -> bool:
    return any(predicate(item) for item in items)


def all_match(items: Iterable[Any], predicate: Callable[[Any], Any]) -> bool:
    return all(predicate(item) for item in items)


def total(*values: Any) -> Any:  # noqa: ANN401
    """
    ``values[0] + values[1] + ...``, folded left to right.
    """
    return reduce(operator.add, values)
