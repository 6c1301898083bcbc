"""Trailing-window rate limiter for outbound requests."""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, List

from loguru import logger


class RateLimiter:
    """Allow at most ``requests_per_minute`` grants in any trailing window.

    Each client (search, fetch) owns its own instance; instances never share
    state. The limiter relies on the single-threaded event loop and takes no
    lock.
    """

    def __init__(
        self,
        requests_per_minute: int = 30,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1.")
        self.requests_per_minute = requests_per_minute
        self.window = window
        self._clock = clock
        self._sleep = sleep
        self._requests: List[float] = []

    def _prune(self, now: float) -> None:
        self._requests = [
            granted for granted in self._requests if now - granted < self.window
        ]

    async def acquire(self) -> None:
        """Wait until one more request fits in the window, then record it."""
        while True:
            now = self._clock()
            self._prune(now)

            if len(self._requests) < self.requests_per_minute:
                self._requests.append(now)
                return

            # Re-checked after waking: concurrent waiters may have taken the slot.
            wait_time = self.window - (now - self._requests[0])
            if wait_time > 0:
                logger.debug(f"Rate limit reached, waiting {wait_time:.2f}s")
                await self._sleep(wait_time)

    @property
    def pending(self) -> int:
        """Number of grants currently counted against the window."""
        self._prune(self._clock())
        return len(self._requests)


__all__ = ["RateLimiter"]
