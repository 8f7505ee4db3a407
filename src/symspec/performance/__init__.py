from .caching import CachedSpecification, cached
from .memoization import MemoizedSpecification, memoized

__all__ = [
    "CachedSpecification",
    "MemoizedSpecification",
    "cached",
    "memoized",
]
