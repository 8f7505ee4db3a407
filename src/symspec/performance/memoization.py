from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, TypeVar

from symspec.expr.nodes import Lambda
from symspec.specification.errs import MissingOperandError
from symspec.specification.specification import Specification

T_contra = TypeVar("T_contra", contravariant=True)

logger = logging.getLogger(__name__)

_Entry = tuple[weakref.ref, bool]


@dataclass(frozen=True, eq=False, kw_only=True)
class MemoizedSpecification(Specification[T_contra]):
    """
    Remember the result of ``inner`` per entity instance.

    Entries are keyed by entity identity and hold the entity weakly: an entry goes away when its entity is garbage
    collected. The first result computed for an entity is kept for its whole lifetime, even if the entity is mutated
    afterwards. Entities that cannot be weakly referenced, such as dicts and ints, and ``None`` are evaluated on
    every call.

    Results are computed outside the lock. When several threads race on the same new entity, the first result
    published wins and every racer returns it.
    """

    inner: Specification[T_contra]

    _entries: dict[int, _Entry] = field(default_factory=dict, init=False, repr=False)
    # Re-entrant: a weakref callback may fire during a collection triggered while the lock is held.
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    def __post_init__(self):
        if self.inner is None:
            raise MissingOperandError("inner")

    @property
    def cache_size(self) -> int:
        """
        Number of entities with a remembered result.
        """
        return len(self._entries)

    def _lookup(self, key: int, entity: Any) -> bool | None:  # noqa: ANN401
        entry = self._entries.get(key)
        if entry is not None and entry[0]() is entity:
            return entry[1]
        return None

    def _evict(self, key: int, ref: weakref.ref) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] is ref:
                del self._entries[key]

    def is_satisfied_by(self, entity: T_contra) -> bool:
        if entity is None:
            return self.inner.is_satisfied_by(entity)

        key = id(entity)
        remembered = self._lookup(key, entity)
        if remembered is not None:
            return remembered

        try:
            ref = weakref.ref(entity, lambda r: self._evict(key, r))
        except TypeError:
            logger.debug("%s cannot be weakly referenced, evaluating without memoization", type(entity).__name__)
            return self.inner.is_satisfied_by(entity)

        result = self.inner.is_satisfied_by(entity)
        with self._lock:
            remembered = self._lookup(key, entity)
            if remembered is not None:
                return remembered
            self._entries[key] = (ref, result)
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def to_symbolic(self) -> Lambda:
        return self.inner.to_symbolic()

    @property
    def entity_type(self) -> Any:  # noqa: ANN401
        return self.inner.entity_type


def memoized(spec: Specification[T_contra]) -> MemoizedSpecification[T_contra]:
    """
    Wrap ``spec`` into a [MemoizedSpecification][]. A memoized specification is returned unchanged.
    """
    if isinstance(spec, MemoizedSpecification):
        return spec
    return MemoizedSpecification(inner=spec)
