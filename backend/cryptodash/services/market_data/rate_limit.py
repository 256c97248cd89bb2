"""
Request budget for the exchange REST API.

Fixed one-minute window: once `max_requests` have gone out in the current
window, callers wait for the window to roll over.
"""

import asyncio
import logging
import time

logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed-window request counter shared by every call on one client."""

    def __init__(self, max_requests: int, window: float = 60.0):
        self.max_requests = max_requests
        self.window = window
        self._count = 0
        self._window_start = time.monotonic()
        self._lock = asyncio.Lock()

    @property
    def remaining(self) -> int:
        return max(0, self.max_requests - self._count)

    async def acquire(self) -> None:
        """Reserve one request, sleeping out the window if the budget is spent."""
        async with self._lock:
            now = time.monotonic()
            if now - self._window_start >= self.window:
                self._count = 0
                self._window_start = now

            if self._count >= self.max_requests:
                wait_time = self.window - (now - self._window_start)
                logger.warning(f"Request budget exhausted, waiting {wait_time:.1f}s")
                await asyncio.sleep(wait_time)
                self._count = 0
                self._window_start = time.monotonic()

            self._count += 1
