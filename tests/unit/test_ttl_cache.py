"""
Tests for taskbridge/cache/ttl_cache.py and taskbridge/cache/stats.py

Covers expiry, lazy eviction, explicit deletion and hit/miss accounting.
"""

import threading

import pytest

from taskbridge.cache.stats import CacheStats
from taskbridge.cache.ttl_cache import CacheEntry, TTLCache


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(default_ttl=60, clock=clock)


class TestCacheEntry:
    """Tests for CacheEntry expiry."""

    def test_entry_without_expiry_never_expires(self):
        """Test that an entry with no expiry is always live."""
        entry = CacheEntry(value="x")
        assert entry.is_expired(10 ** 12) is False

    def test_entry_expires_after_deadline(self):
        """Test that an entry is expired strictly after its deadline."""
        entry = CacheEntry(value="x", expires_at=100.0)
        assert entry.is_expired(100.0) is False
        assert entry.is_expired(100.5) is True


class TestTTLCache:
    """Tests for TTLCache."""

    def test_set_then_get(self, cache):
        """Test basic store and read."""
        cache.set("k", {"a": 1})
        assert cache.get("k") == {"a": 1}

    def test_get_missing_returns_default(self, cache):
        """Test missing keys return None or the given default."""
        assert cache.get("missing") is None
        assert cache.get("missing", "fallback") == "fallback"

    def test_entry_expires_after_ttl(self, cache, clock):
        """Test an entry with ttl=1 is gone after 1.1 seconds."""
        cache.set("k", "v", ttl=1)
        assert cache.get("k") == "v"
        clock.advance(1.1)

        assert cache.get("k") is None
        assert cache.has("k") is False

    def test_entry_live_before_ttl(self, cache, clock):
        """Test an entry is still readable before its TTL elapses."""
        cache.set("k", "v", ttl=10)
        clock.advance(9)
        assert cache.get("k") == "v"

    def test_default_ttl_applied(self, cache, clock):
        """Test set() without ttl uses the cache default."""
        cache.set("k", "v")
        clock.advance(59)
        assert cache.has("k") is True
        clock.advance(2)
        assert cache.has("k") is False

    def test_none_default_ttl_never_expires(self, clock):
        """Test a cache with no default TTL keeps entries indefinitely."""
        cache = TTLCache(default_ttl=None, clock=clock)
        cache.set("k", "v")
        clock.advance(10 ** 9)
        assert cache.get("k") == "v"

    def test_expired_entry_evicted_on_read(self, cache, clock):
        """Test lazy eviction removes the expired entry from storage."""
        cache.set("k", "v", ttl=1)
        assert cache.size == 1
        clock.advance(5)

        cache.get("k")
        assert cache.size == 0

    def test_set_overwrites_and_resets_expiry(self, cache, clock):
        """Test re-setting a key replaces value and expiry."""
        cache.set("k", "old", ttl=1)
        clock.advance(0.5)
        cache.set("k", "new", ttl=10)
        clock.advance(5)
        assert cache.get("k") == "new"

    def test_delete(self, cache):
        """Test delete reports whether the key existed."""
        cache.set("k", "v")
        assert cache.delete("k") is True
        assert cache.delete("k") is False
        assert cache.get("k") is None

    def test_clear(self, cache):
        """Test clear removes everything."""
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert cache.size == 0
        assert cache.keys() == []

    def test_falsy_values_are_cached(self, cache):
        """Test that empty lists and zero are real hits, not misses."""
        cache.set("empty", [])
        cache.set("zero", 0)
        assert cache.get("empty", "miss") == []
        assert cache.get("zero", "miss") == 0

    def test_purge_expired(self, cache, clock):
        """Test purge_expired drops only expired entries."""
        cache.set("short", 1, ttl=1)
        cache.set("long", 2, ttl=100)
        clock.advance(2)

        assert cache.purge_expired() == 1
        assert cache.keys() == ["long"]

    def test_hits_and_misses_recorded(self, cache):
        """Test reads are counted in stats."""
        cache.set("k", "v")
        cache.get("k")
        cache.get("k")
        cache.get("nope")

        summary = cache.stats.get_summary()
        assert summary["hits"] == 2
        assert summary["misses"] == 1

    def test_concurrent_reads_counted_exactly(self, cache):
        """Test hit and miss counters stay exact when threads share the cache."""
        cache.set("task:1", "v")

        def reader():
            for _ in range(500):
                cache.get("task:1")
                cache.get("task:2")

        threads = [threading.Thread(target=reader) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        summary = cache.stats.get_summary()
        assert summary["hits"] == 4000
        assert summary["misses"] == 4000
        assert summary["namespaces"]["task"] == {"hits": 4000, "misses": 4000}


class TestCacheStats:
    """Tests for CacheStats."""

    def test_rate_with_no_traffic(self):
        """Test hit rate is zero before any reads."""
        stats = CacheStats()
        assert stats.get_rate() == 0.0
        assert stats.get_total() == 0

    def test_rate_calculation(self):
        """Test hit rate is the share of reads that hit."""
        stats = CacheStats()
        for _ in range(3):
            stats.record_hit()
        stats.record_miss()

        assert stats.get_total() == 4
        assert stats.get_rate() == 0.75

    def test_reset(self):
        """Test reset zeroes the counters."""
        stats = CacheStats()
        stats.record_hit()
        stats.reset()
        assert stats.get_total() == 0

    def test_namespaces(self):
        """Test counters are split by key prefix."""
        stats = CacheStats()
        stats.record_hit("board:1:items")
        stats.record_miss("board:2:items")
        stats.record_miss("task:9")
        stats.record_hit("plain")

        namespaces = stats.get_summary()["namespaces"]
        assert namespaces["board"] == {"hits": 1, "misses": 1}
        assert namespaces["task"] == {"hits": 0, "misses": 1}
        assert namespaces["default"] == {"hits": 1, "misses": 0}

    def test_evictions_counted(self, cache, clock):
        """Test lazy and swept evictions are both counted."""
        cache.set("a", 1, ttl=1)
        cache.set("b", 2, ttl=1)
        cache.set("c", 3, ttl=1)
        clock.advance(2)

        cache.get("a")
        cache.purge_expired()

        assert cache.stats.evictions == 3
