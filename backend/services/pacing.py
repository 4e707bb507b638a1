"""Spacing policy for outbound text-generation calls.

The upstream API is rate limited, so batch scoring starts calls no closer
together than ``min_interval`` seconds and keeps at most ``max_concurrency``
calls in flight. The defaults (1 second, 1 call) give strictly sequential
processing with a one-second pause between documents.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import AsyncIterator


class CallPacer:
    def __init__(
        self,
        min_interval: float = 1.0,
        max_concurrency: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.min_interval = max(0.0, min_interval)
        self.max_concurrency = max_concurrency
        self._clock = clock
        self._sleep = sleep
        self._last_start: float | None = None
        self._spacing_lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(max_concurrency)

    async def _wait_for_turn(self) -> None:
        async with self._spacing_lock:
            if self._last_start is not None:
                delay = self._last_start + self.min_interval - self._clock()
                if delay > 0:
                    await self._sleep(delay)
            self._last_start = self._clock()

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold a concurrency slot for one call, started no earlier than allowed."""
        async with self._slots:
            await self._wait_for_turn()
            yield
