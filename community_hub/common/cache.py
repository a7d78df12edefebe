"""
Process-lifetime in-memory cache with a fixed time-to-live.

Entries are (value, stored_at) pairs keyed by resolved URL. Staleness is
checked lazily on read; stale entries stay in the map until overwritten
or until clear() is called.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict

# Lookup default that cannot collide with a cached value (JSON null decodes to None)
MISSING = object()


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload and the clock time it was stored at."""
    value: Any
    stored_at: float


class TTLCache:
    """
    Key -> (value, timestamp) map with lazy TTL expiry.

    No size bound and no eviction: the process is short-lived (a build or a
    page session), so the number of distinct URLs stays small.
    """

    def __init__(self, ttl_seconds: float = 3600.0, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or default when missing or older than the TTL."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if self._clock() - entry.stored_at >= self.ttl_seconds:
                return default
            return entry.value

    def put(self, key: str, value: Any) -> None:
        """Store value with the current clock time, replacing any prior entry."""
        with self._lock:
            self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        """Remove every entry (manual refresh hook)."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        # Physical presence, regardless of staleness
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
