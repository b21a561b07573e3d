"""Token bucket rate limiter for coroutines."""
import asyncio
import time


class RateLimiter:
    """Token bucket rate limiter shared by the coroutines of one event loop."""

    def __init__(self, calls_per_minute):
        self.rate = calls_per_minute / 60.0  # tokens per second
        self.max_tokens = calls_per_minute
        self.tokens = float(calls_per_minute)
        self.last_time = time.monotonic()
        self._lock = None

    async def wait(self):
        """Suspend until a token is available."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self.last_time
            self.tokens = min(self.max_tokens, self.tokens + elapsed * self.rate)
            self.last_time = now

            if self.tokens < 1:
                sleep_time = (1 - self.tokens) / self.rate
                await asyncio.sleep(sleep_time)
                self.last_time = time.monotonic()
                self.tokens = 0
            else:
                self.tokens -= 1
