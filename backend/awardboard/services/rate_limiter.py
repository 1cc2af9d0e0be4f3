"""
AwardBoard Backend - Fixed Window Rate Limiter
================================================

What:  Per-session request counter guarding GET /home.
How:   Tracks a (window_start, count) pair per key in memory.
Who:   The /home route handler; a rejected hit becomes award 429.

Algorithm: Fixed Window Counter
    1. A key's window opens on its first request (or the first request after
       the previous window has fully elapsed)
    2. Every request in the window increments the count, rejected ones too
    3. count <= limit → allowed; count > limit → rejected until the window ends

    With the defaults (5 requests / 5 seconds) the 6th request inside a
    window is rejected. retry_after tells the client when the window closes.

Concurrency:
    hit() never awaits, so concurrent requests on the event loop are
    serialized and no increment is lost. Counters are per process.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict

from awardboard.config import settings

logger = logging.getLogger(__name__)


@dataclass
class Window:
    start: float
    count: int = 0


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    count: int
    retry_after: int


class FixedWindowRateLimiter:
    """
    Attributes:
        limit:   Max allowed requests per window
        window:  Window length in seconds
    """

    CLEANUP_EVERY = 1000

    def __init__(
        self,
        limit: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._windows: Dict[str, Window] = {}
        self._hits = 0

    def hit(self, key: str) -> RateDecision:
        """Count one request for `key` and decide whether it may proceed."""
        now = self._clock()
        current = self._windows.get(key)
        if current is None or now - current.start >= self.window:
            current = Window(start=now)
            self._windows[key] = current

        current.count += 1
        allowed = current.count <= self.limit
        retry_after = max(1, math.ceil(current.start + self.window - now))

        if not allowed:
            logger.warning(
                "Rate limit exceeded: %d requests in %.1fs window",
                current.count,
                self.window,
            )

        self._hits += 1
        if self._hits % self.CLEANUP_EVERY == 0:
            self._cleanup_expired(now)

        return RateDecision(allowed=allowed, count=current.count, retry_after=retry_after)

    def _cleanup_expired(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now - w.start >= self.window]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug("Cleaned up %d expired rate limit windows", len(expired))

    def reset(self) -> None:
        self._windows.clear()
        self._hits = 0


home_rate_limiter = FixedWindowRateLimiter(
    limit=settings.home_rate_limit_requests,
    window=settings.home_rate_limit_window,
)
