"""
Sliding-window rate limiter shared by outbound API clients.
"""

import asyncio
import time
from collections import deque


class AsyncRateLimiter:
    """
    Allow at most ``max_calls`` entries per ``period`` seconds.

    Callers queue on an internal lock, so concurrent tasks are released in
    arrival order. Use as ``async with limiter: ...``.
    """

    def __init__(self, max_calls: int = 2, period: float = 1.0):
        if max_calls < 1:
            raise ValueError("max_calls must be at least 1")
        if period <= 0:
            raise ValueError("period must be positive")
        self.max_calls = max_calls
        self.period = period
        self._calls: deque[float] = deque()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            while True:
                now = time.monotonic()
                while self._calls and now - self._calls[0] >= self.period:
                    self._calls.popleft()

                if len(self._calls) < self.max_calls:
                    self._calls.append(now)
                    return

                await asyncio.sleep(self.period - (now - self._calls[0]))

    async def __aenter__(self) -> "AsyncRateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None
