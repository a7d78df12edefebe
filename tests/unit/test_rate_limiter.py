"""
Unit tests for community_hub/common/rate_limiter.py

Tests the sliding-window limiter guarding the raw-file host:
- 60 attempts per rolling hour, fail-fast on the 61st
- Window expiry frees slots one timestamp at a time
- check() vs acquire() recording semantics
- Stats and export
"""

import pytest

from community_hub.common.rate_limiter import (
    RateLimiter,
    RateLimitExceededError,
    RateLimitStats,
)


class TestRateLimitExceededError:
    """Tests for RateLimitExceededError exception."""

    def test_error_message_formatting(self):
        """Should format error message with provider and limits."""
        error = RateLimitExceededError("github_raw", 60, 60)

        assert error.provider == "github_raw"
        assert error.current == 60
        assert error.limit == 60
        assert "github_raw" in str(error)
        assert "60/60" in str(error)
        assert "unknown" in str(error)


class TestRateLimiterWindow:
    """Tests for the rolling window behaviour."""

    def test_allows_exactly_max_requests(self, clock):
        """Sixty attempts inside one window are all permitted."""
        limiter = RateLimiter("github_raw", max_requests=60, window_seconds=3600, clock=clock)

        for _ in range(60):
            limiter.acquire()
            clock.advance(1)

        assert limiter.remaining() == 0

    def test_sixty_first_request_rejected(self, clock):
        """The 61st attempt within the hour raises without being recorded."""
        limiter = RateLimiter("github_raw", max_requests=60, window_seconds=3600, clock=clock)
        for _ in range(60):
            limiter.acquire()

        with pytest.raises(RateLimitExceededError) as exc_info:
            limiter.acquire()

        assert exc_info.value.current == 60
        assert exc_info.value.reset_at is not None
        assert limiter.get_stats().requests_in_window == 60
        assert limiter.get_stats().rejected_requests == 1

    def test_oldest_expiry_frees_exactly_one_slot(self, clock):
        """Once the oldest timestamp ages out, exactly one more attempt is allowed."""
        limiter = RateLimiter("github_raw", max_requests=60, window_seconds=3600, clock=clock)
        start = clock()
        for _ in range(60):
            limiter.acquire()
            clock.advance(1)

        # Oldest was recorded at start; it expires once now - window reaches it
        clock.now = start + 3600
        limiter.acquire()

        with pytest.raises(RateLimitExceededError):
            limiter.acquire()

    def test_check_does_not_record(self, clock):
        """check() reports availability without consuming a slot."""
        limiter = RateLimiter("github_raw", max_requests=1, window_seconds=60, clock=clock)

        assert limiter.check() is True
        assert limiter.check() is True
        limiter.acquire()
        assert limiter.check() is False

    def test_window_fully_expires(self, clock):
        """After a full window every slot is available again."""
        limiter = RateLimiter("github_raw", max_requests=3, window_seconds=10, clock=clock)
        for _ in range(3):
            limiter.acquire()

        clock.advance(10)

        assert limiter.remaining() == 3


class TestRateLimiterStats:
    """Tests for statistics and reset."""

    def test_stats_track_requests(self, clock):
        """Should count permitted and rejected attempts."""
        limiter = RateLimiter("github_raw", max_requests=2, window_seconds=60, clock=clock)
        limiter.acquire()
        limiter.acquire()
        with pytest.raises(RateLimitExceededError):
            limiter.acquire()

        stats = limiter.get_stats()

        assert isinstance(stats, RateLimitStats)
        assert stats.total_requests == 2
        assert stats.rejected_requests == 1
        assert stats.requests_in_window == 2
        assert stats.last_request_at is not None

    def test_reset_clears_window(self, clock):
        """reset() empties the window and the counters."""
        limiter = RateLimiter("github_raw", max_requests=1, window_seconds=60, clock=clock)
        limiter.acquire()

        limiter.reset()

        assert limiter.remaining() == 1
        assert limiter.get_stats().total_requests == 0

    def test_to_dict(self, clock):
        """Should export configuration and stats."""
        limiter = RateLimiter("github_raw", max_requests=5, window_seconds=60, clock=clock)
        limiter.acquire()

        data = limiter.to_dict()

        assert data["provider"] == "github_raw"
        assert data["max_requests"] == 5
        assert data["remaining"] == 4
        assert data["stats"]["total_requests"] == 1
