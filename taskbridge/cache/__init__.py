"""
In-process caching layer for Task Bridge.

Provides:
- TTL cache with lazy expiry
- Application cache accessors (board items, tasks, preferences)
- Statistics tracking
"""

from .ttl_cache import TTLCache, CacheEntry
from .app_cache import AppCache
from .stats import CacheStats

__all__ = [
    "TTLCache",
    "CacheEntry",
    "AppCache",
    "CacheStats",
]
