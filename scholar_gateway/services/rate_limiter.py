"""
Per-source outbound request spacing.

Each source gets one RateLimiter for the life of the process. The limiter is
advisory and in-process only: several gateway processes do not coordinate.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Optional

from ..utils.config import Config

logger = logging.getLogger(__name__)


class RateLimiter:
    """Grants one slot at a time, at least `interval` seconds apart"""

    def __init__(
        self,
        interval: float,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.interval = interval
        self.name = name
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def last_request(self) -> Optional[float]:
        return self._last_request

    async def acquire(self) -> None:
        """Wait for the next free slot and record it as taken"""
        async with self._lock:
            if self._last_request is not None:
                wait = self.interval - (self._clock() - self._last_request)
                if wait > 0:
                    logger.debug("Rate limiter %s waiting %.3fs", self.name, wait)
                    await self._sleep(wait)
            self._last_request = self._clock()


SOURCE_INTERVALS = {
    "arxiv": lambda: Config.ARXIV_RATE_LIMIT,
    "pubmed": lambda: Config.PUBMED_RATE_LIMIT,
}

# Global limiter instances, one per source
_rate_limiters: Dict[str, RateLimiter] = {}


def get_rate_limiter(source: str) -> RateLimiter:
    """Get the process-wide rate limiter for a source"""
    if source not in SOURCE_INTERVALS:
        raise ValueError(f"Unknown source: {source}")

    if source not in _rate_limiters:
        _rate_limiters[source] = RateLimiter(SOURCE_INTERVALS[source](), name=source)

    return _rate_limiters[source]


def reset_rate_limiters():
    """Drop all limiter instances (useful for testing)"""
    _rate_limiters.clear()
