"""
Cache statistics tracking.

Counters are kept overall and per key namespace (the part of a key before the
first ":", e.g. "board" or "task"), plus the number of expired entries evicted.
"""
import logging
from collections import defaultdict
from typing import Any, Dict, Hashable

logger = logging.getLogger(__name__)


def key_namespace(key: Hashable) -> str:
    """Namespace of a cache key ("board:1:items" -> "board")."""
    if isinstance(key, str) and ":" in key:
        return key.split(":", 1)[0]
    return "default"


class CacheStats:
    """Track cache hit/miss rates and evictions."""

    def __init__(self):
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self._by_namespace: Dict[str, Dict[str, int]] = defaultdict(lambda: {"hits": 0, "misses": 0})

    def record_hit(self, key: Hashable = None):
        self.hits += 1
        self._by_namespace[key_namespace(key)]["hits"] += 1

    def record_miss(self, key: Hashable = None):
        self.misses += 1
        self._by_namespace[key_namespace(key)]["misses"] += 1

    def record_eviction(self, count: int = 1):
        self.evictions += count

    def get_rate(self) -> float:
        """
        Get cache hit rate.

        Returns:
            Hit rate as a float between 0.0 and 1.0
        """
        total = self.get_total()
        return self.hits / total if total > 0 else 0.0

    def get_total(self) -> int:
        return self.hits + self.misses

    def get_summary(self) -> Dict[str, Any]:
        """
        Statistics summary.

        Returns:
            Dictionary with hits, misses, total, hit rate, evictions and the
            per-namespace counters
        """
        return {
            "hits": self.hits,
            "misses": self.misses,
            "total": self.get_total(),
            "hit_rate": self.get_rate(),
            "evictions": self.evictions,
            "namespaces": {name: dict(counts) for name, counts in self._by_namespace.items()},
        }

    def reset(self):
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self._by_namespace.clear()
        logger.info("Cache statistics reset")
