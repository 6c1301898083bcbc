"""Host memory pressure sampling."""

from __future__ import annotations

from dataclasses import dataclass

import psutil


@dataclass(frozen=True)
class MemorySnapshot:
    """Point-in-time view of host memory, in bytes."""

    total: int
    free: int
    used: int
    usage_ratio: float

    @property
    def usage_percent(self) -> float:
        return self.usage_ratio * 100


class MemoryMonitor:
    """Reads host memory statistics on demand. Nothing is cached."""

    def snapshot(self) -> MemorySnapshot:
        memory = psutil.virtual_memory()
        total = memory.total
        free = memory.available
        used = total - free
        return MemorySnapshot(
            total=total,
            free=free,
            used=used,
            usage_ratio=used / total if total else 0.0,
        )


__all__ = ["MemoryMonitor", "MemorySnapshot"]
