from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from threading import Lock
from typing import TypeVar

from symspec.compiler import compile_lambda
from symspec.expr.nodes import Lambda
from symspec.specification.errs import MissingOperandError
from symspec.specification.specification import Specification

T_contra = TypeVar("T_contra", contravariant=True)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False, kw_only=True)
class CachedSpecification(Specification[T_contra]):
    """
    Evaluate through a compiled closure that is built at most once.

    The symbolic form of ``inner`` is captured at construction. The closure is compiled on first use, under a lock
    with a double check, so concurrent first calls still compile exactly once.
    """

    inner: Specification[T_contra]

    _expression: Lambda = field(init=False, repr=False)
    _compiled: Callable[[T_contra], bool] | None = field(default=None, init=False, repr=False)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    def __post_init__(self):
        if self.inner is None:
            raise MissingOperandError("inner")
        object.__setattr__(self, "_expression", self.inner.to_symbolic())

    @property
    def compiled_predicate(self) -> Callable[[T_contra], bool]:
        """
        The compiled closure, materialized on first access.
        """
        compiled = self._compiled
        if compiled is None:
            with self._lock:
                compiled = self._compiled
                if compiled is None:
                    logger.debug("Materializing compiled predicate for %r", self.inner)
                    compiled = compile_lambda(self._expression)
                    object.__setattr__(self, "_compiled", compiled)
        return compiled

    def is_satisfied_by(self, entity: T_contra) -> bool:
        return self.compiled_predicate(entity)

    def to_symbolic(self) -> Lambda:
        return self._expression


def cached(spec: Specification[T_contra]) -> CachedSpecification[T_contra]:
    """
    Wrap ``spec`` into a [CachedSpecification][]. A cached specification is returned unchanged.
    """
    if isinstance(spec, CachedSpecification):
        return spec
    return CachedSpecification(inner=spec)
