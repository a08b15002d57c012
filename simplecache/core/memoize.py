"""Transparent memoization of function calls on top of a :class:`Cache`.

Cache keys look like ``"<function hash>:<arguments hash>"``. Every result of
one memoized function shares the ``"<function hash>:"`` prefix, which is what
:meth:`Memoizer.invalidate` removes.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Optional

from simplecache.core import hashcode
from simplecache.core.store import Cache, validate_ttl

logger = logging.getLogger(__name__)

_MISSING = object()


def args_hash(args: tuple, kwargs: dict[str, Any]) -> int:
    """Hash a call's arguments as one composite value."""
    call_args = args
    if kwargs:
        call_args = args + (tuple(sorted(kwargs.items())),)
    return hashcode.of(call_args)


def function_hash(fn: Callable[..., Any], identity: Optional[str] = None) -> int:
    if identity is not None:
        return hashcode.of_string(identity)
    return hashcode.of_function(fn)


class Memoizer:
    """Wraps callables so their results are cached with a fixed TTL."""

    def __init__(self, cache: Cache) -> None:
        self.cache = cache

    def memoize(
        self,
        fn: Callable[..., Any],
        ttl: float,
        *,
        identity: Optional[str] = None,
    ) -> Callable[..., Any]:
        """Return a caching wrapper around ``fn``.

        The function hash is computed here, once. Pass ``identity`` to key the
        function by a stable name instead of its source text; such a function
        must then be invalidated through its wrapper or the same identity.
        """
        ttl = validate_ttl(ttl)
        fn_hash = function_hash(fn, identity)
        memoizer = self

        def key_for(*args, **kwargs) -> str:
            return f"{fn_hash}:{args_hash(args, kwargs)}"

        @wraps(fn)
        def wrapper(*args, **kwargs):
            key = key_for(*args, **kwargs)
            cache = memoizer.cache
            if cache.is_valid(key):
                value = cache.get(key, _MISSING)
                if value is not _MISSING:
                    return value
            logger.debug("Cache miss for %s (%s)", getattr(fn, "__qualname__", fn), key)
            result = fn(*args, **kwargs)
            cache.set(key, result, ttl)
            return result

        wrapper.original = fn
        wrapper.function_hash = fn_hash
        wrapper.ttl = ttl
        wrapper.key_for = key_for
        wrapper.invalidate = lambda: memoizer.invalidate(wrapper)
        return wrapper

    def memoized(self, ttl: float, *, identity: Optional[str] = None):
        """Decorator form of :meth:`memoize`."""
        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            return self.memoize(fn, ttl, identity=identity)
        return decorator

    def invalidate(self, target: Callable[..., Any] | str) -> int:
        """Delete every cached result of a function.

        ``target`` is a memoized wrapper, the plain function it wraps, or the
        ``identity`` string it was memoized under. Returns the number of
        entries removed.
        """
        if isinstance(target, str):
            fn_hash = hashcode.of_string(target)
        else:
            fn_hash = getattr(target, "function_hash", None)
            if fn_hash is None:
                fn_hash = hashcode.of_function(target)

        prefix = f"{fn_hash}:"
        removed = 0
        for key in self.cache.keys(lambda k: k.startswith(prefix)):
            if self.cache.delete(key):
                removed += 1
        logger.debug("Invalidated %d entries with prefix %s", removed, prefix)
        return removed
