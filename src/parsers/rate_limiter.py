import asyncio


class RateLimiter:
    """Minimum-interval limiter for one provider's async HTTP client.

    Each provider client owns its own instance; there is no limiter shared
    across providers, so one slow upstream never throttles another.
    A non-positive ``max_rps`` disables limiting (used by tests).
    """

    def __init__(self, max_rps: float) -> None:
        self._min_interval = 1.0 / max_rps if max_rps > 0 else 0.0
        self._next_slot = 0.0
        self._lock = asyncio.Lock()

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def acquire(self) -> None:
        if not self._min_interval:
            return
        async with self._lock:
            loop = asyncio.get_running_loop()
            wait = self._next_slot - loop.time()
            if wait > 0:
                await asyncio.sleep(wait)
            self._next_slot = loop.time() + self._min_interval
