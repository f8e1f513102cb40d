"""In-memory response cache with per-entry expiry.

Entries are never swept in the background. Expiry is checked lazily on
read and a stale entry is masked, not evicted, until it is overwritten.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog


logger = structlog.get_logger()


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the clock reading at which it was stored."""

    key: str
    value: Any
    stored_at: float


class ResponseCache:
    """Key to value store whose entries expire after a fixed TTL.

    Not thread-safe; meant to be shared by coroutines on a single event loop.
    """

    def __init__(
        self,
        ttl_ms: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_ms: Time-to-live of each entry in milliseconds.
            clock: Monotonic clock returning seconds.
        """
        self._ttl_seconds = ttl_ms / 1000.0
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._log = logger.bind(component="cache")

    @property
    def ttl_ms(self) -> int:
        """Get the entry time-to-live in milliseconds."""
        return round(self._ttl_seconds * 1000)

    def get(self, key: str) -> Any | None:
        """Return the value stored for a key if it has not expired.

        Args:
            key: Cache key.

        Returns:
            The stored value, or None when absent or expired.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl_seconds:
            self._log.debug("cache_entry_expired", key=key)
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous entry for the key.

        Args:
            key: Cache key.
            value: Value to store.
        """
        self._entries[key] = CacheEntry(key=key, value=value, stored_at=self._clock())

    def clear(self) -> None:
        """Drop all entries."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
