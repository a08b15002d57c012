"""Pydantic schemas for the cache admin API responses."""

from __future__ import annotations

from pydantic import BaseModel

# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


class KeyListOut(BaseModel):
    total: int
    keys: list[str]


class KeyOut(BaseModel):
    key: str
    valid: bool


class DeletedOut(BaseModel):
    deleted: bool


class ClearedOut(BaseModel):
    evicted: int


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class HitMissOut(BaseModel):
    hit: int = 0
    miss: int = 0


class TrueFalseOut(BaseModel):
    true: int = 0
    false: int = 0


class StatisticsOut(BaseModel):
    enabled: bool
    set: int = 0
    get: HitMissOut = HitMissOut()
    is_valid: TrueFalseOut = TrueFalseOut()
    delete: int = 0


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthOut(BaseModel):
    status: str
    entries: int
    statistics: bool
