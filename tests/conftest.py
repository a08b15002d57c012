"""Shared fixtures: a controllable millisecond clock."""

from __future__ import annotations

import pytest


class FakeClock:
    """Callable clock returning milliseconds; advance it with ``tick``."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def tick(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_700_000_000_000.0)
