"""
Centralized error handling for the community hub data layer.

Defines the fetch/parse error taxonomy and the helpers that convert
low-level failures into graceful fallbacks at each data-source boundary.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

T = TypeVar("T")


class FetchError(Exception):
    """Base class for every failure raised while fetching or decoding a document."""

    retryable: bool = True

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class FetchTimeoutError(FetchError):
    """The request exceeded the hard per-request timeout."""


class RateLimitedError(FetchError):
    """
    Rate limit hit, either by the local sliding window (client_side=True,
    no network call was made) or by a 429 response from the server.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        client_side: bool = True,
        reset_at: Optional[datetime] = None,
    ):
        self.client_side = client_side
        self.reset_at = reset_at
        super().__init__(message, url)


class NotFoundError(FetchError):
    """The server answered 404."""

    retryable = False


class HttpStatusError(FetchError):
    """Any other non-2xx response."""

    def __init__(self, status_code: int, reason: str = "", url: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP {status_code}: {reason}".rstrip(": "), url)


class NetworkError(FetchError):
    """Transport-level failure (DNS, connection reset, TLS...)."""


class EmptyPayloadError(FetchError):
    """A 200 response with a blank body."""


class ParseError(FetchError):
    """Malformed CSV or JSON, or a document that fails schema validation."""

    retryable = False


class ConfigurationError(Exception):
    """A required setting is missing or unusable."""


class CountMismatchError(Exception):
    """Fetched question counts disagree with the index and policy is 'fail'."""

    def __init__(self, mismatches: List[str]):
        self.mismatches = mismatches
        super().__init__("Question count mismatch: " + "; ".join(mismatches))


@dataclass
class SourceFailure:
    """Structured record of one data source failing during page-data assembly."""

    source: str
    message: str
    exception_type: Optional[str] = None
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @classmethod
    def from_exception(cls, source: str, exc: BaseException) -> "SourceFailure":
        return cls(source=source, message=str(exc), exception_type=type(exc).__name__)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "message": self.message,
            "exception_type": self.exception_type,
            "timestamp": self.timestamp,
        }


class DataAssemblyError(Exception):
    """Page-data assembly failed according to the configured failure policy."""

    def __init__(self, failures: List[SourceFailure]):
        self.failures = failures
        details = "; ".join(f"{f.source}: {f.message}" for f in failures)
        super().__init__(f"Unable to fetch page data. {details}")


def source_boundary(
    operation_name: str,
    source: str = "unknown",
    fallback_factory: Callable[[], Any] = list,
    critical: bool = False,
    reraise: bool = False,
):
    """
    Decorator for async data-source operations with consistent error handling.

    On failure the error is logged (WARNING, or ERROR with traceback when
    critical) and a fresh fallback value is returned instead of raising.

    Args:
        operation_name: Human-readable operation name (e.g., "fetch jobs")
        source: Source identifier (e.g., "google_sheets")
        fallback_factory: Builds the value returned on failure (default: list)
        critical: If True, logs at ERROR level with stack trace
        reraise: If True, re-raises the exception after logging

    Usage:
        @source_boundary("fetch index", source="github_json", fallback_factory=dict)
        async def get_filter_options(self):
            ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            logger = logging.getLogger(func.__module__)
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                log_level = logging.ERROR if critical else logging.WARNING
                logger.log(
                    log_level,
                    f"[{source}] [{operation_name}] Failed: {e}",
                    exc_info=critical,
                )
                if reraise:
                    raise
                return fallback_factory()

        return wrapper

    return decorator
