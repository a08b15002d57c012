"""SimpleCache admin API entry point.

Run with:  uvicorn simplecache.main:app
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from simplecache.api.routes import router
from simplecache.cache import cache

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATISTICS = os.getenv("SIMPLECACHE_STATISTICS", "").strip().lower() in {"1", "true", "yes", "on"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    if STATISTICS and not cache.statistics_enabled:
        cache.enable_statistics()
    logger.info("SimpleCache admin API is ready (%d entries).", len(cache))
    yield
    logger.info("Shutting down SimpleCache admin API.")


app = FastAPI(
    title="SimpleCache",
    description="Inspect and manage the in-process TTL cache and its statistics.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router)


@app.get("/", tags=["Root"])
def root():
    return {
        "name": "SimpleCache",
        "version": "1.0.0",
        "docs": "/docs",
        "description": "In-process TTL cache with function memoization",
    }
