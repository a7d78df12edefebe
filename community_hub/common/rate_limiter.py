"""
Rate Limiting Module.

Client-side guard for the unauthenticated raw-file host, which allows
60 requests per hour. Uses a sliding window of request timestamps and
fails fast instead of waiting: a page build should degrade, not stall
for up to an hour.

Usage:
    limiter = RateLimiter("github_raw", max_requests=60, window_seconds=3600)

    limiter.acquire()   # raises RateLimitExceededError when the window is full
    response = await client.get(url)
"""

import threading
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional


@dataclass
class RateLimitStats:
    """Statistics for rate limiting."""
    total_requests: int = 0
    rejected_requests: int = 0
    requests_in_window: int = 0
    last_request_at: Optional[datetime] = None


class RateLimitExceededError(Exception):
    """Raised when the sliding window is full."""

    def __init__(self, provider: str, current: int, limit: int, reset_at: Optional[datetime] = None):
        self.provider = provider
        self.current = current
        self.limit = limit
        self.reset_at = reset_at
        reset = reset_at.isoformat() if reset_at else "unknown"
        super().__init__(
            f"Rate limit exceeded for {provider}: {current}/{limit}. Resets at {reset}"
        )


class RateLimiter:
    """
    Thread-safe rate limiter using a sliding window algorithm.

    A timestamp is recorded for every permitted attempt, whether the request
    that follows succeeds or not. Rejected attempts are not recorded.
    """

    def __init__(
        self,
        provider: str,
        max_requests: int = 60,
        window_seconds: float = 3600.0,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize rate limiter.

        Args:
            provider: Provider name for logging/stats
            max_requests: Maximum requests inside the rolling window
            window_seconds: Length of the rolling window
            clock: Returns the current time in seconds (injectable for tests)
        """
        self.provider = provider
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock

        self._window: deque = deque()
        self._lock = threading.Lock()
        self._stats = RateLimitStats()

    def _clean_window(self, now: float) -> None:
        """Drop timestamps that fell out of the rolling window."""
        cutoff = now - self.window_seconds
        while self._window and self._window[0] <= cutoff:
            self._window.popleft()

    def _reset_at(self) -> Optional[datetime]:
        if not self._window:
            return None
        return datetime.fromtimestamp(self._window[0] + self.window_seconds, tz=timezone.utc)

    def check(self) -> bool:
        """
        Check if a request is allowed without recording it.

        Returns:
            True if request allowed, False if rate limited
        """
        with self._lock:
            self._clean_window(self._clock())
            return len(self._window) < self.max_requests

    def acquire(self) -> None:
        """
        Record a request attempt.

        Raises:
            RateLimitExceededError: If the window already holds max_requests entries
        """
        with self._lock:
            now = self._clock()
            self._clean_window(now)

            if len(self._window) >= self.max_requests:
                self._stats.rejected_requests += 1
                raise RateLimitExceededError(
                    self.provider,
                    len(self._window),
                    self.max_requests,
                    reset_at=self._reset_at(),
                )

            self._window.append(now)
            self._stats.total_requests += 1
            self._stats.requests_in_window = len(self._window)
            self._stats.last_request_at = datetime.fromtimestamp(now, tz=timezone.utc)

    def remaining(self) -> int:
        """Requests still available in the current window."""
        with self._lock:
            self._clean_window(self._clock())
            return max(0, self.max_requests - len(self._window))

    def get_stats(self) -> RateLimitStats:
        """Get rate limiting statistics."""
        with self._lock:
            self._clean_window(self._clock())
            return RateLimitStats(
                total_requests=self._stats.total_requests,
                rejected_requests=self._stats.rejected_requests,
                requests_in_window=len(self._window),
                last_request_at=self._stats.last_request_at,
            )

    def reset(self) -> None:
        """Reset all rate limit tracking."""
        with self._lock:
            self._window.clear()
            self._stats = RateLimitStats()

    def to_dict(self) -> Dict[str, Any]:
        """Export limiter state as dictionary."""
        stats = self.get_stats()
        return {
            "provider": self.provider,
            "max_requests": self.max_requests,
            "window_seconds": self.window_seconds,
            "stats": {
                "total_requests": stats.total_requests,
                "rejected_requests": stats.rejected_requests,
                "requests_in_window": stats.requests_in_window,
                "last_request_at": stats.last_request_at.isoformat() if stats.last_request_at else None,
            },
            "remaining": self.remaining(),
        }
