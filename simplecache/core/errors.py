"""Exceptions raised by the cache, the memoizer and the statistics wrapper."""

from __future__ import annotations


class SimpleCacheError(Exception):
    """Base class for every error raised by simplecache."""


class InvalidTTL(SimpleCacheError, ValueError):
    """A time-to-live was not a positive number of milliseconds."""

    def __init__(self, ttl: object) -> None:
        super().__init__(f"ttl must be a positive number of milliseconds, got {ttl!r}")
        self.ttl = ttl


class InvalidKey(SimpleCacheError, ValueError):
    """A key was neither a non-empty string nor a finite number."""

    def __init__(self, key: object) -> None:
        super().__init__(f"key must be a non-empty string or a finite number, got {key!r}")
        self.key = key


class AlreadyEnabled(SimpleCacheError, RuntimeError):
    """Statistics were enabled on a cache that is already instrumented."""

    def __init__(self) -> None:
        super().__init__("statistics are already enabled")
