"""Access policy for the cache admin endpoints.

Without SIMPLECACHE_API_KEY every route is open. With it, routes that change
the cache (delete a key, clear) always require a matching ``X-API-Key``
header; read-only routes (key listing, statistics) require it too unless
SIMPLECACHE_OPEN_READS is truthy. ``/health`` is never guarded.
"""

from __future__ import annotations

import os
import secrets
from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

API_KEY = os.getenv("SIMPLECACHE_API_KEY") or None
OPEN_READS = os.getenv("SIMPLECACHE_OPEN_READS", "").strip().lower() in {"1", "true", "yes", "on"}

key_header = APIKeyHeader(name="X-API-Key", auto_error=False, description="Cache admin key")


def check_key(presented: Optional[str]) -> bool:
    """Raise 401/403 unless ``presented`` matches the configured key.

    Returns False in open mode and True once a key has been verified.
    """
    if API_KEY is None:
        return False
    if not presented:
        raise HTTPException(status_code=401, detail="X-API-Key header required")
    if not secrets.compare_digest(presented.encode(), API_KEY.encode()):
        raise HTTPException(status_code=403, detail="Invalid API key")
    return True


async def require_admin(presented: Optional[str] = Security(key_header)) -> bool:
    return check_key(presented)


async def require_reader(presented: Optional[str] = Security(key_header)) -> bool:
    if OPEN_READS:
        return False
    return check_key(presented)
