"""
Unit tests for the key set caches.
"""

import pytest

from okta_jwt_verifier.jwks.cache import Cache, MemoryCache, NopCache


class FakeTimer:
    """Manually advanced clock for TTL tests."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestMemoryCache:
    """Test cases for MemoryCache."""

    @pytest.fixture
    def timer(self):
        return FakeTimer()

    @pytest.fixture
    def cache(self, timer):
        """Create MemoryCache with a five minute TTL."""
        return MemoryCache(ttl_seconds=300, timer=timer)

    def test_miss(self, cache):
        """Test lookup of an unknown key."""
        assert cache.get("jwks") == (None, False)

    def test_hit(self, cache):
        """Test lookup after set."""
        cache.set("jwks", {"keys": []})

        assert cache.get("jwks") == ({"keys": []}, True)

    def test_set_replaces(self, cache):
        """Test that set overwrites an existing item."""
        cache.set("jwks", 1)
        cache.set("jwks", 2)

        assert cache.get("jwks") == (2, True)

    def test_expiration(self, cache, timer):
        """Test that entries expire after the TTL."""
        cache.set("jwks", {"keys": []})

        timer.now = 299
        assert cache.get("jwks")[1] is True

        timer.now = 301
        assert cache.get("jwks") == (None, False)

    def test_clear(self, cache):
        """Test clearing the cache."""
        cache.set("jwks", 1)
        cache.clear()

        assert cache.get("jwks") == (None, False)

    def test_is_a_cache(self, cache):
        assert isinstance(cache, Cache)


class TestNopCache:
    """Test cases for NopCache."""

    def test_never_stores(self):
        """Test that NopCache always misses."""
        cache = NopCache()
        cache.set("jwks", {"keys": []})

        assert cache.get("jwks") == (None, False)


def test_cache_is_abstract():
    """Test that the Cache contract cannot be instantiated directly."""
    with pytest.raises(TypeError):
        Cache()
