"""
Fetch context: the explicit home for state shared across fetches.

Holds the settings, the clock, the TTL cache and the raw-host rate limiter.
Create one per process (or per build) and pass it to every source, instead
of relying on module-level globals.

Usage:
    async with FetchContext.from_settings() as ctx:
        data = await get_home_page_data(ctx)
"""

import time
from typing import Callable, Optional

import httpx

from community_hub.common.cache import TTLCache
from community_hub.common.config import HubSettings, get_settings
from community_hub.common.rate_limiter import RateLimiter


class FetchContext:
    """Settings, clock, cache, rate limiter and (optionally) a shared HTTP client."""

    def __init__(
        self,
        settings: HubSettings,
        clock: Callable[[], float] = time.time,
        cache: Optional[TTLCache] = None,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            settings: Loaded HubSettings
            clock: Time source in seconds, shared by cache and limiter
            cache: Pre-built cache (default: TTL from settings)
            rate_limiter: Pre-built limiter (default: limits from settings)
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.settings = settings
        self.clock = clock
        if cache is None:
            cache = TTLCache(ttl_seconds=settings.cache_ttl_seconds, clock=clock)
        self.cache = cache
        self.rate_limiter = rate_limiter or RateLimiter(
            provider="github_raw",
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
            clock=clock,
        )
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(cls, settings: Optional[HubSettings] = None, **kwargs) -> "FetchContext":
        return cls(settings or get_settings(), **kwargs)

    @property
    def client(self) -> Optional[httpx.AsyncClient]:
        """Shared client while the context is entered, else None."""
        return self._client

    def new_client(self) -> httpx.AsyncClient:
        """Build a client carrying the configured timeout (and test transport)."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.request_timeout_seconds),
            transport=self.transport,
        )

    async def __aenter__(self) -> "FetchContext":
        self._client = self.new_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def clear_cache(self) -> None:
        """Manual refresh: forget every cached document."""
        self.cache.clear()
