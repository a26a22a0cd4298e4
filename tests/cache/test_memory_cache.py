"""Tests for the in-memory cache adapter and cache selection."""

from storefront.cache import MemoryCache, get_cache, reset_cache, set_cache


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestMemoryCache:
    def test_get_returns_value_before_expiry(self):
        clock = _Clock()
        cache = MemoryCache(clock=clock)
        cache.set("k", {"a": 1}, ttl_seconds=600)

        clock.now += 599
        assert cache.get("k") == {"a": 1}

    def test_entry_expires_after_ttl(self):
        clock = _Clock()
        cache = MemoryCache(clock=clock)
        cache.set("k", "v", ttl_seconds=600)

        clock.now += 600
        assert cache.get("k") is None

    def test_values_are_copied(self):
        cache = MemoryCache()
        value = {"items": [1]}
        cache.set("k", value, ttl_seconds=60)
        value["items"].append(2)

        cached = cache.get("k")
        cached["items"].append(3)
        assert cache.get("k") == {"items": [1]}

    def test_delete_and_miss(self):
        cache = MemoryCache()
        cache.set("k", "v", ttl_seconds=60)
        cache.delete("k")
        assert cache.get("k") is None
        assert cache.get("never-set") is None


class TestCacheSelection:
    def test_default_is_memory_cache(self):
        assert isinstance(get_cache(), MemoryCache)

    def test_can_run_without_cache(self):
        set_cache(None)
        assert get_cache() is None

    def test_disabled_by_environment(self, monkeypatch):
        monkeypatch.setenv("CACHE_ENABLED", "false")
        reset_cache()
        assert get_cache() is None
