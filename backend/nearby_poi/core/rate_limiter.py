import asyncio
import logging
import time
from typing import Awaitable, Callable

from nearby_poi.core.logger import logs


class RateLimiter:
    """
    Minimum-interval gate for outbound requests.

    Holds the monotonic timestamp of the last permitted request. ``wait()``
    suspends the caller until ``min_interval`` seconds have passed since that
    stamp and then moves the stamp to now. Waiters queue on a lock that is
    released before the request itself is sent, so requests may still overlap
    once they are through the gate.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: float | None = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        async with self._lock:
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self.min_interval:
                    delay = self.min_interval - elapsed
                    logs.log(logging.DEBUG, f"Rate limiter: waiting {delay:.3f}s before next request")
                    await self._sleep(delay)
            self._last_request = self._clock()
