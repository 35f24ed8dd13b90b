"""
Unit tests for Cache Domain value objects.

Tests key validation, expiration policy and backend selection.
"""

from datetime import timedelta

import pytest

from app_caching.domain.cache.exceptions import (
    CacheException,
    CacheSerializationError,
    InvalidCacheKeyError,
)
from app_caching.domain.cache.value_objects import (
    CacheBackendType,
    CacheKey,
    Expiration,
)


class TestCacheKey:
    """Test CacheKey value object."""

    def test_valid_key(self):
        """Test plain key creation."""
        key = CacheKey("all_users")

        assert key.value == "all_users"
        assert str(key) == "all_users"

    def test_key_with_inner_whitespace_is_allowed(self):
        """Only blank keys are rejected."""
        assert CacheKey("user list").value == "user list"

    @pytest.mark.parametrize("raw", ["", " ", "   ", "\t", "\n", " \t\n "])
    def test_blank_key_rejected(self, raw):
        """Test empty and whitespace-only keys."""
        with pytest.raises(InvalidCacheKeyError, match="empty or whitespace"):
            CacheKey(raw)

    @pytest.mark.parametrize("raw", [None, 42, b"all_users"])
    def test_non_string_key_rejected(self, raw):
        """Test keys that are not text."""
        with pytest.raises(InvalidCacheKeyError, match="must be a string"):
            CacheKey(raw)

    def test_invalid_key_error_is_value_error(self):
        """Callers may catch key errors as ValueError."""
        with pytest.raises(ValueError):
            CacheKey("")

    def test_invalid_key_error_details(self):
        """Test error code and details."""
        with pytest.raises(InvalidCacheKeyError) as exc_info:
            CacheKey("  ")

        assert exc_info.value.error_code == "CACHE_INVALID_KEY"
        assert exc_info.value.details == {"key": "'  '"}
        assert isinstance(exc_info.value, CacheException)

    def test_of_returns_existing_key(self):
        """Test coercion keeps CacheKey instances."""
        key = CacheKey("k")
        assert CacheKey.of(key) is key
        assert CacheKey.of("k") == key


class TestExpiration:
    """Test expiration policy."""

    def test_default_is_five_minutes(self):
        assert Expiration.DEFAULT == timedelta(minutes=5)

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("10", timedelta(minutes=10)),
            (" 15 ", timedelta(minutes=15)),
            ("1", timedelta(minutes=1)),
        ],
    )
    def test_minutes_parsed(self, raw, expected):
        assert Expiration.from_minutes_config(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "2.5", "ten", "0", "-3"])
    def test_invalid_minutes_fall_back(self, raw):
        assert Expiration.from_minutes_config(raw) == timedelta(minutes=5)

    def test_resolve_uses_default_when_omitted(self):
        default = timedelta(minutes=7)
        assert Expiration.resolve(None, default) is default

    def test_resolve_keeps_explicit_expiration(self):
        explicit = timedelta(seconds=30)
        assert Expiration.resolve(explicit, timedelta(minutes=5)) == explicit

    @pytest.mark.parametrize("bad", [timedelta(0), timedelta(seconds=-1)])
    def test_resolve_rejects_non_positive(self, bad):
        with pytest.raises(ValueError, match="positive"):
            Expiration.resolve(bad, timedelta(minutes=5))

    def test_resolve_rejects_non_timedelta(self):
        with pytest.raises(ValueError, match="timedelta"):
            Expiration.resolve(60, timedelta(minutes=5))


class TestCacheBackendType:
    """Test backend selection from configuration."""

    def test_redis_selects_remote(self):
        assert CacheBackendType.from_config("Redis") is CacheBackendType.REMOTE

    @pytest.mark.parametrize(
        "raw", [None, "", "InMemory", "redis", "REDIS", " Redis", "Redis ", "Memcached"]
    )
    def test_anything_else_selects_local(self, raw):
        assert CacheBackendType.from_config(raw) is CacheBackendType.LOCAL


class TestCacheSerializationError:
    """Test serialization error context."""

    def test_chains_original_error(self):
        original = TypeError("not serializable")
        error = CacheSerializationError(
            key="k", value_type="object", original_error=original
        )

        assert error.__cause__ is original
        assert error.error_code == "CACHE_SERIALIZATION_ERROR"
        assert error.details["original_error_type"] == "TypeError"
        assert "object" in error.message
