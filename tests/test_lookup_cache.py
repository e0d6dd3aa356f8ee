"""Tests for the time-boxed lookup cache."""

from fundbook.domain.cache import LookupCache, MISSING


def test_get_missing_key_returns_sentinel(clock):
    cache = LookupCache(clock=clock)
    assert cache.get("a") is MISSING
    assert cache.get("a", "fallback") == "fallback"


def test_cached_none_is_distinct_from_missing(clock):
    """A remembered lookup miss is stored as None."""
    cache = LookupCache(clock=clock)
    cache.set("a", None)
    assert cache.get("a") is None
    assert len(cache) == 1


def test_entries_survive_within_window(clock):
    cache = LookupCache(ttl_seconds=300, clock=clock)
    cache.set("a", "1000")
    clock.advance(300)
    assert cache.get("a") == "1000"


def test_whole_cache_expires_after_window(clock):
    """Every entry is dropped together once the window closes."""
    cache = LookupCache(ttl_seconds=300, clock=clock)
    cache.set("a", "1000")
    clock.advance(299)
    cache.set("b", "1100")
    clock.advance(2)
    assert cache.get("b") is MISSING
    assert cache.get("a") is MISSING
    assert len(cache) == 0


def test_invalidate_starts_new_window(clock):
    cache = LookupCache(ttl_seconds=300, clock=clock)
    clock.advance(250)
    cache.invalidate()
    cache.set("a", "1000")
    clock.advance(100)
    assert cache.get("a") == "1000"
