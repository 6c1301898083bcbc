"""Shared fixtures for the web tools tests."""

from __future__ import annotations

import pytest

from webscout.tools.web_tools.memory import MemorySnapshot


class FakeMemoryMonitor:
    """Returns a fixed usage ratio and counts how often it was asked."""

    def __init__(self, usage_ratio: float, total: int = 16 * 1024**3) -> None:
        self.usage_ratio = usage_ratio
        self.total = total
        self.calls = 0

    def snapshot(self) -> MemorySnapshot:
        self.calls += 1
        used = int(self.total * self.usage_ratio)
        return MemorySnapshot(
            total=self.total,
            free=self.total - used,
            used=used,
            usage_ratio=self.usage_ratio,
        )


class FakeClock:
    """Manual clock whose sleep advances time instead of waiting."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def memory_factory():
    return FakeMemoryMonitor


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
