"""Call counters for a cache, implemented as a wrapper around it.

``set`` and ``delete`` are counted when they change the store, ``get`` as a
hit or a miss and ``is_valid`` by its outcome. ``has``, ``keys`` and ``clear``
pass through untracked.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from simplecache.core.errors import AlreadyEnabled
from simplecache.core.store import Cache

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class Counters:
    set: int = 0
    get_hit: int = 0
    get_miss: int = 0
    is_valid_true: int = 0
    is_valid_false: int = 0
    delete: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "set": self.set,
            "get": {"hit": self.get_hit, "miss": self.get_miss},
            "is_valid": {"true": self.is_valid_true, "false": self.is_valid_false},
            "delete": self.delete,
        }


class StatisticsCache:
    """Same operations as :class:`Cache`, counting calls on the way through."""

    def __init__(self, cache: Cache) -> None:
        self.wrapped = cache
        self._counters = Counters()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self.wrapped)

    def _bump(self, field: str) -> None:
        with self._lock:
            setattr(self._counters, field, getattr(self._counters, field) + 1)

    def has(self, key: Any) -> bool:
        return self.wrapped.has(key)

    def set(self, key: Any, value: Any, ttl: float) -> None:
        self.wrapped.set(key, value, ttl)
        self._bump("set")

    def get(self, key: Any, default: Optional[Any] = None) -> Optional[Any]:
        value = self.wrapped.get(key, _MISSING)
        if value is _MISSING:
            self._bump("get_miss")
            return default
        self._bump("get_hit")
        return value

    def is_valid(self, key: Any) -> bool:
        result = self.wrapped.is_valid(key)
        self._bump("is_valid_true" if result else "is_valid_false")
        return result

    def delete(self, key: Any) -> bool:
        result = self.wrapped.delete(key)
        if result:
            self._bump("delete")
        return result

    def keys(self, predicate: Callable[[str], bool] | None = None) -> list[str]:
        return self.wrapped.keys(predicate)

    def clear(self) -> int:
        return self.wrapped.clear()

    def statistics(self) -> dict[str, Any]:
        """Snapshot of the counters."""
        with self._lock:
            return self._counters.as_dict()

    def reset_statistics(self) -> None:
        with self._lock:
            self._counters = Counters()


def instrumented(cache: Cache | StatisticsCache) -> StatisticsCache:
    """Wrap ``cache`` in a :class:`StatisticsCache`.

    Raises AlreadyEnabled if ``cache`` is already instrumented.
    """
    if isinstance(cache, StatisticsCache):
        raise AlreadyEnabled()
    logger.info("Statistics enabled on %r", cache)
    return StatisticsCache(cache)
