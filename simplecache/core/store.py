"""In-process key-value store with lazily evaluated time-to-live.

Entries are never reclaimed on expiry. :meth:`Cache.is_valid` computes
liveness on read while :meth:`Cache.get` returns whatever is stored, stale or
not. Stale entries stay in place until overwritten, deleted or cleared.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, Generic, Optional, TypeVar

from simplecache.core.errors import InvalidKey, InvalidTTL

logger = logging.getLogger(__name__)

V = TypeVar("V")

Clock = Callable[[], float]


def wall_clock_ms() -> float:
    return time.time() * 1000


@dataclass
class CacheEntry(Generic[V]):
    value: V
    cached_at: float
    ttl: float

    def is_live(self, now: float) -> bool:
        return now < self.cached_at + self.ttl


def validate_key(key: Any) -> bool:
    """Return True for a non-empty string or a finite int/float."""
    return normalize_key(key) is not None


def validate_ttl(ttl: Any) -> float:
    """Return ``ttl`` as a float, raising InvalidTTL unless it is positive."""
    if isinstance(ttl, bool) or not isinstance(ttl, Real):
        raise InvalidTTL(ttl)
    ttl = float(ttl)
    if math.isnan(ttl) or ttl <= 0:
        raise InvalidTTL(ttl)
    return ttl


def normalize_key(key: Any) -> Optional[str]:
    """Canonical string form of a valid key, or None for an invalid one.

    Integers too long for the interpreter's int-to-str limit count as invalid.
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, str):
        return key or None
    if isinstance(key, int):
        try:
            return str(key)
        except ValueError:
            return None
    if isinstance(key, float) and math.isfinite(key):
        return str(int(key)) if key.is_integer() else repr(key)
    return None


class Cache(Generic[V]):
    """TTL-scoped key-value storage.

    ``clock`` returns the current time in milliseconds and defaults to the
    wall clock. TTLs are milliseconds as well.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or wall_clock_ms
        self._entries: dict[str, CacheEntry[V]] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} entries={len(self)}>"

    def has(self, key: Any) -> bool:
        name = normalize_key(key)
        with self._lock:
            return name is not None and name in self._entries

    def set(self, key: Any, value: V, ttl: float) -> None:
        ttl = validate_ttl(ttl)
        name = normalize_key(key)
        if name is None:
            raise InvalidKey(key)
        with self._lock:
            self._entries[name] = CacheEntry(value=value, cached_at=self._clock(), ttl=ttl)

    def get(self, key: Any, default: Optional[V] = None) -> Optional[V]:
        """Return the stored value, expired or not, or ``default`` when absent."""
        name = normalize_key(key)
        with self._lock:
            entry = self._entries.get(name) if name is not None else None
        return default if entry is None else entry.value

    def is_valid(self, key: Any) -> bool:
        """True while the entry exists and its TTL has not yet elapsed."""
        name = normalize_key(key)
        with self._lock:
            entry = self._entries.get(name) if name is not None else None
        if entry is None:
            return False
        return entry.is_live(self._clock())

    def delete(self, key: Any) -> bool:
        name = normalize_key(key)
        with self._lock:
            if name is None or name not in self._entries:
                return False
            del self._entries[name]
            return True

    def keys(self, predicate: Callable[[str], bool] | None = None) -> list[str]:
        """Snapshot of stored keys, live or expired, in insertion order."""
        with self._lock:
            names = list(self._entries)
        if predicate is None:
            return names
        return [name for name in names if predicate(name)]

    def clear(self) -> int:
        """Remove every entry and return how many there were."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cache cleared (%d entries removed)", count)
        return count
