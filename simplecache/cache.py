"""Process-wide cache facade.

``cache`` is created once at import and lives for the whole process; it is
only ever reset through ``clear``. Pass it (or your own :class:`SimpleCache`)
by reference to whatever needs it.

    from simplecache import units
    from simplecache.cache import cached

    @cached(ttl=5 * units.minute)
    def lookup(code):
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from simplecache.core.memoize import Memoizer
from simplecache.core.statistics import StatisticsCache, instrumented
from simplecache.core.store import Cache, Clock

logger = logging.getLogger(__name__)


class SimpleCache:
    """One store, its memoizer and optional statistics behind one object."""

    def __init__(self, clock: Clock | None = None, statistics: bool = False) -> None:
        self.base = Cache(clock)
        self._cache: Cache | StatisticsCache = self.base
        self._memoizer = Memoizer(self._cache)
        if statistics:
            self.enable_statistics()

    def __len__(self) -> int:
        return len(self.base)

    # -----------------------------------------------------------------------
    # Store
    # -----------------------------------------------------------------------

    def has(self, key: Any) -> bool:
        return self._cache.has(key)

    def set(self, key: Any, value: Any, ttl: float) -> None:
        self._cache.set(key, value, ttl)

    def get(self, key: Any, default: Optional[Any] = None) -> Optional[Any]:
        return self._cache.get(key, default)

    def is_valid(self, key: Any) -> bool:
        return self._cache.is_valid(key)

    def delete(self, key: Any) -> bool:
        return self._cache.delete(key)

    def keys(self, predicate: Callable[[str], bool] | None = None) -> list[str]:
        return self._cache.keys(predicate)

    def clear(self) -> int:
        return self._cache.clear()

    # -----------------------------------------------------------------------
    # Memoization
    # -----------------------------------------------------------------------

    def memoize(self, fn: Callable[..., Any], ttl: float, *, identity: Optional[str] = None):
        return self._memoizer.memoize(fn, ttl, identity=identity)

    def memoized(self, ttl: float, *, identity: Optional[str] = None):
        return self._memoizer.memoized(ttl, identity=identity)

    def invalidate(self, target: Callable[..., Any] | str) -> int:
        return self._memoizer.invalidate(target)

    # -----------------------------------------------------------------------
    # Statistics
    # -----------------------------------------------------------------------

    @property
    def statistics_enabled(self) -> bool:
        return isinstance(self._cache, StatisticsCache)

    def enable_statistics(self) -> bool:
        """Start counting cache calls. Can only be done once per facade."""
        self._cache = instrumented(self._cache)
        self._memoizer.cache = self._cache
        return True

    def statistics(self) -> dict[str, Any]:
        """Counter snapshot, or an empty dict while statistics are disabled."""
        if isinstance(self._cache, StatisticsCache):
            return self._cache.statistics()
        return {}


cache = SimpleCache()


def cached(ttl: float, *, identity: Optional[str] = None):
    """Decorator that caches the return value of a function for *ttl* ms.

    The cache key is built from the function's hash and its arguments.
    """
    return cache.memoized(ttl, identity=identity)


def clear_cache() -> int:
    """Flush the entire cache. Returns the number of evicted entries."""
    return cache.clear()
