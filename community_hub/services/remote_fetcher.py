"""
Remote Fetcher

Bounded-timeout HTTP GET against the raw-file host and the spreadsheet
export endpoint. Every failure is classified into the fetch error taxonomy
(timeout, rate limited, not found, HTTP error, network error, empty
payload, parse error) so callers can decide what is worth retrying.

Usage:
    fetcher = RemoteFetcher(ctx)
    index = await fetcher.fetch_json(f"{ctx.settings.raw_base_url}/index.json")
    csv_text = await fetcher.fetch_text(sheet_url, rate_limited=False, follow_redirects=True)
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from community_hub import __version__
from community_hub.common.cache import MISSING
from community_hub.common.context import FetchContext
from community_hub.common.error_handling import (
    EmptyPayloadError,
    FetchTimeoutError,
    HttpStatusError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitedError,
)
from community_hub.common.logger import get_logger
from community_hub.common.rate_limiter import RateLimitExceededError

USER_AGENT = f"TWS-Community-Hub/{__version__}"

ACCEPT_JSON = "application/json"
ACCEPT_CSV = "text/csv"


def _parse_reset_header(value: Optional[str]) -> Optional[datetime]:
    """X-RateLimit-Reset carries epoch seconds."""
    if not value:
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


class RemoteFetcher:
    """Classifying HTTP GET with rate limiting and JSON caching."""

    def __init__(self, context: FetchContext, source: str = "remote"):
        self.context = context
        self.logger = get_logger(__name__, source=source)

    @property
    def timeout(self) -> float:
        return self.context.settings.request_timeout_seconds

    def _headers(self, accept: str) -> dict:
        return {"User-Agent": USER_AGENT, "Accept": accept}

    def _check_rate_limit(self, url: str) -> None:
        """Record the attempt in the sliding window, or fail fast without a network call."""
        try:
            self.context.rate_limiter.acquire()
        except RateLimitExceededError as e:
            self.logger.warning(f"Client-side rate limit reached ({e.current}/{e.limit}), skipping {url}")
            raise RateLimitedError(
                f"Rate limit exceeded. Please try again later. {e}",
                url=url,
                client_side=True,
                reset_at=e.reset_at,
            ) from e

    async def _get(self, client: httpx.AsyncClient, url: str, accept: str, follow_redirects: bool) -> httpx.Response:
        # httpx timeouts bound each connect/read/write step; wait_for bounds the whole request
        try:
            return await asyncio.wait_for(
                client.get(
                    url,
                    headers=self._headers(accept),
                    follow_redirects=follow_redirects,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise FetchTimeoutError(
                f"Request timeout while fetching {url} (limit {self.timeout:g}s)", url=url
            ) from e
        except httpx.TransportError as e:
            raise NetworkError(f"Network error while fetching {url}: {e}", url=url) from e

    def _raise_for_status(self, response: httpx.Response, url: str) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return
        if status == 404:
            raise NotFoundError(f"File not found: {url}", url=url)
        if status == 429:
            reset_at = _parse_reset_header(response.headers.get("X-RateLimit-Reset"))
            self.logger.warning(
                f"Server-side rate limit (HTTP 429) for {url}, resets at "
                f"{reset_at.isoformat() if reset_at else 'unknown'}"
            )
            raise RateLimitedError(
                "Remote rate limit exceeded",
                url=url,
                client_side=False,
                reset_at=reset_at,
            )
        raise HttpStatusError(status, response.reason_phrase, url=url)

    async def fetch_text(
        self,
        url: str,
        *,
        accept: str = ACCEPT_CSV,
        rate_limited: bool = True,
        follow_redirects: bool = False,
    ) -> str:
        """
        GET url and return the body text.

        Args:
            url: Absolute URL
            accept: Accept header value
            rate_limited: Consult the raw-host sliding window before the request
            follow_redirects: Follow 3xx responses (only the jobs sheet needs this)

        Raises:
            FetchError subclass describing the failure
        """
        if rate_limited:
            self._check_rate_limit(url)

        client = self.context.client
        if client is not None:
            response = await self._get(client, url, accept, follow_redirects)
        else:
            async with self.context.new_client() as owned_client:
                response = await self._get(owned_client, url, accept, follow_redirects)

        self._raise_for_status(response, url)

        text = response.text
        if not text or not text.strip():
            raise EmptyPayloadError(f"Received empty payload from {url}", url=url)

        self.logger.debug(f"Fetched {len(text)} chars from {url}")
        return text

    async def fetch_json(self, url: str, *, rate_limited: bool = True, use_cache: bool = True) -> Any:
        """
        GET url and decode it as JSON, serving from the TTL cache when fresh.

        The decoded payload is cached under the URL after a successful fetch.
        """
        if use_cache:
            cached = self.context.cache.get(url, MISSING)
            if cached is not MISSING:
                self.logger.debug(f"Cache hit: {url}")
                return cached

        text = await self.fetch_text(url, accept=ACCEPT_JSON, rate_limited=rate_limited)
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ParseError(f"Malformed JSON from {url}: {e}", url=url) from e

        if use_cache:
            self.context.cache.put(url, data)

        self.logger.info(f"Loaded JSON: {url}")
        return data
