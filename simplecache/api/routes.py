"""FastAPI endpoints for inspecting and managing the process cache."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from simplecache.api.auth import require_admin, require_reader
from simplecache.api.schemas import (
    ClearedOut,
    DeletedOut,
    HealthOut,
    KeyListOut,
    KeyOut,
    StatisticsOut,
)
from simplecache.cache import SimpleCache, cache

router = APIRouter(prefix="/api/v1", tags=["SimpleCache admin"])


def get_cache() -> SimpleCache:
    return cache


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


@router.get("/cache/keys", summary="List cached keys", response_model=KeyListOut)
def list_keys(
    prefix: str | None = Query(None, description="Only keys starting with this prefix"),
    valid_only: bool = Query(False, description="Skip entries whose TTL has elapsed"),
    store: SimpleCache = Depends(get_cache),
    _auth: bool = Depends(require_reader),
) -> KeyListOut:
    keys = store.keys(lambda k: k.startswith(prefix)) if prefix else store.keys()
    if valid_only:
        keys = [k for k in keys if store.is_valid(k)]
    return KeyListOut(total=len(keys), keys=keys)


@router.get("/cache/keys/{key:path}", summary="Inspect one key", response_model=KeyOut)
def get_key(
    key: str,
    store: SimpleCache = Depends(get_cache),
    _auth: bool = Depends(require_reader),
) -> KeyOut:
    if not store.has(key):
        raise HTTPException(status_code=404, detail=f"Key not cached: {key}")
    return KeyOut(key=key, valid=store.is_valid(key))


@router.delete("/cache/keys/{key:path}", summary="Delete one key", response_model=DeletedOut)
def delete_key(
    key: str,
    store: SimpleCache = Depends(get_cache),
    _auth: bool = Depends(require_admin),
) -> DeletedOut:
    if not store.delete(key):
        raise HTTPException(status_code=404, detail=f"Key not cached: {key}")
    return DeletedOut(deleted=True)


# ---------------------------------------------------------------------------
# Cache management
# ---------------------------------------------------------------------------


@router.post("/cache/clear", summary="Clear the cache", response_model=ClearedOut)
def flush_cache(
    store: SimpleCache = Depends(get_cache),
    _auth: bool = Depends(require_admin),
) -> ClearedOut:
    return ClearedOut(evicted=store.clear())


@router.get("/cache/stats", summary="Cache call statistics", response_model=StatisticsOut)
def get_statistics(
    store: SimpleCache = Depends(get_cache),
    _auth: bool = Depends(require_reader),
) -> StatisticsOut:
    return StatisticsOut(enabled=store.statistics_enabled, **store.statistics())


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", summary="Health check", response_model=HealthOut)
def health(store: SimpleCache = Depends(get_cache)) -> HealthOut:
    return HealthOut(status="ok", entries=len(store), statistics=store.statistics_enabled)
