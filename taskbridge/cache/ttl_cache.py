"""
In-process TTL cache.

Entries carry an absolute expiry computed at insertion time and are evicted
lazily when read. There is no size bound and no background sweeper.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable, List, Optional

from .stats import CacheStats

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached value and its absolute expiry (None never expires)."""
    value: Any
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


class TTLCache:
    """
    Expiring key/value store safe for concurrent use.

    Args:
        default_ttl: TTL in seconds applied when set() gets none.
            None means entries never expire.
        clock: Monotonic time source, in seconds.
        stats: Optional hit/miss counter.
    """

    def __init__(
        self,
        default_ttl: Optional[float] = 3600,
        clock: Callable[[], float] = time.monotonic,
        stats: Optional[CacheStats] = None,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict = {}
        self._lock = threading.Lock()
        self.stats = stats or CacheStats()

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        """Store value under key; ttl overrides the default TTL."""
        ttl = self.default_ttl if ttl is None else ttl
        expires_at = self._clock() + ttl if ttl is not None else None
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=expires_at)

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the live value for key, evicting it if expired."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self.stats.record_miss(key)
                return default
            self.stats.record_hit(key)
            return entry.value

    def has(self, key: Hashable) -> bool:
        """Check for a live entry without returning it."""
        with self._lock:
            return self._live_entry(key) is not None

    def delete(self, key: Hashable) -> bool:
        """Remove key unconditionally. Returns True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> List[Hashable]:
        """Keys currently stored, including not-yet-evicted expired ones."""
        with self._lock:
            return list(self._entries.keys())

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def purge_expired(self) -> int:
        """
        Evict every expired entry.

        Optional sweep for long-running processes with key churn; nothing
        calls it automatically.

        Returns:
            Number of entries evicted
        """
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                del self._entries[key]
            if expired:
                self.stats.record_eviction(len(expired))
                logger.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def _live_entry(self, key: Hashable) -> Optional[CacheEntry]:
        # Caller holds the lock.
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            self.stats.record_eviction()
            return None
        return entry
