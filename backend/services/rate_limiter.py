"""Token bucket limiter in front of the model API."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class TokenBucketRateLimiter:
    """Hands out one token per model call.

    Starts full with ``capacity`` tokens and refills ``refill_rate`` tokens per
    second. Waiters queue on an ``asyncio.Lock``, which wakes them in arrival
    order, so no caller is starved.
    """

    def __init__(
        self,
        capacity: int = 5,
        refill_rate: float = 1 / 3,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if refill_rate <= 0:
            raise ValueError("refill_rate must be positive")
        self.capacity = capacity
        self.refill_rate = refill_rate
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(capacity)
        self._last_refill = clock()
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def tokens(self) -> float:
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last_refill
        self._tokens = min(self.capacity, self._tokens + elapsed * self.refill_rate)
        self._last_refill = now

    async def acquire(self) -> None:
        """Wait until a token is available, then consume it."""
        if self._closed:
            raise RuntimeError("Rate limiter has been shut down")

        async with self._lock:
            self._refill()
            if self._tokens < 1:
                wait_time = (1 - self._tokens) / self.refill_rate
                logger.debug("Rate limit reached, waiting %.2fs", wait_time)
                await self._sleep(wait_time)
                self._refill()
                # Clock granularity can leave us a hair short of a full token
                self._tokens = max(self._tokens, 1.0)
            self._tokens -= 1

    def shutdown(self) -> None:
        self._closed = True
