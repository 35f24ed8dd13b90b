"""
Unit tests for the Cache Service dispatcher.

Tests key validation, default expiration, backend selection and the
soft-miss policy across both backends.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import List
from unittest.mock import AsyncMock, patch

import pytest

from app_caching.core.config import CacheSettings, Settings
from app_caching.domain.cache.exceptions import (
    CacheSerializationError,
    InvalidCacheKeyError,
)
from app_caching.domain.cache.value_objects import CacheBackendType, CacheKey
from app_caching.infrastructure.cache.local_backend import LocalCacheBackend
from app_caching.infrastructure.cache.remote_backend import RemoteCacheBackend
from app_caching.infrastructure.redis.connection_factory import RedisConnectionFactory
from app_caching.services.cache.cache_service import CacheService, create_cache_service
from app_caching.services.users.schemas import UserRead


@dataclass
class Point:
    x: int
    y: int


BLANK_KEYS = ["", " ", "\t\n"]

ROUND_TRIP_VALUES = [
    ("text", str),
    (42, int),
    (3.5, float),
    (True, bool),
    ([1, 2, 3], List[int]),
    ({"nested": {"list": [1, "two"]}}, dict),
    ([UserRead(id=1, name="Grace Hopper", email="grace@example.com")], List[UserRead]),
]


class TestCacheServiceBothBackends:
    """Behaviour shared by the local and Redis backends."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value,value_type", ROUND_TRIP_VALUES)
    async def test_round_trip(self, cache_service, value, value_type):
        assert await cache_service.set("key", value) is True
        assert await cache_service.get("key", value_type) == value

    @pytest.mark.asyncio
    async def test_round_trip_with_cache_key(self, cache_service):
        await cache_service.set(CacheKey("key"), {"a": 1})
        assert await cache_service.get(CacheKey("key")) == {"a": 1}

    @pytest.mark.asyncio
    async def test_unknown_key_is_absent(self, cache_service):
        assert await cache_service.get("never_set") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", BLANK_KEYS)
    async def test_set_blank_key_raises(self, cache_service, key):
        with pytest.raises(InvalidCacheKeyError):
            await cache_service.set(key, "value")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", BLANK_KEYS)
    async def test_get_blank_key_raises(self, cache_service, key):
        with pytest.raises(InvalidCacheKeyError):
            await cache_service.get(key)

    @pytest.mark.asyncio
    async def test_explicit_expiration(self, cache_service, clock):
        await cache_service.set("key", "value", timedelta(seconds=1))
        clock.advance(2)

        assert await cache_service.get("key") is None

    @pytest.mark.asyncio
    async def test_default_expiration(self, cache_service, clock):
        await cache_service.set("key", "value")

        clock.advance(4 * 60 + 59)
        assert await cache_service.get("key") == "value"

        clock.advance(2)
        assert await cache_service.get("key") is None

    @pytest.mark.asyncio
    async def test_overwrite(self, cache_service):
        await cache_service.set("key", "first")
        await cache_service.set("key", "second")

        assert await cache_service.get("key") == "second"

    @pytest.mark.asyncio
    async def test_wrong_type_is_absent(self, cache_service):
        await cache_service.set("key", "text")
        assert await cache_service.get("key", List[UserRead]) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "value,value_type",
        [("42", int), ([True, False], List[int]), (1, bool), ([1, 2], List[str])],
    )
    async def test_wrong_type_is_not_coerced(self, cache_service, value, value_type):
        await cache_service.set("key", value)

        assert await cache_service.get("key", value_type) is None
        assert await cache_service.get("key") == value

    @pytest.mark.asyncio
    async def test_non_positive_expiration_rejected(self, cache_service):
        with pytest.raises(ValueError, match="positive"):
            await cache_service.set("key", "value", timedelta(0))


class TestCacheServiceLocal:
    """Local backend specifics."""

    @pytest.mark.asyncio
    async def test_identity_preserved(self, local_cache_service):
        value = Point(1, 2)
        await local_cache_service.set("point", value)

        assert await local_cache_service.get("point") is value

    @pytest.mark.asyncio
    async def test_unserializable_values_allowed(self, local_cache_service):
        marker = object()
        await local_cache_service.set("marker", marker)

        assert await local_cache_service.get("marker") is marker


class TestCacheServiceRemote:
    """Redis backend specifics."""

    @pytest.mark.asyncio
    async def test_values_pass_through_bytes(self, remote_cache_service, fake_redis):
        value = [UserRead(id=1, name="Grace Hopper", email="grace@example.com")]
        await remote_cache_service.set("users", value)

        payload, _ = fake_redis.data["users"]
        assert isinstance(payload, bytes)
        result = await remote_cache_service.get("users", List[UserRead])
        assert result == value
        assert result is not value

    @pytest.mark.asyncio
    async def test_corrupt_entry_is_absent(self, remote_cache_service, fake_redis):
        await remote_cache_service.set("users", [1, 2, 3])
        _, pxat = fake_redis.data["users"]
        fake_redis.data["users"] = (b"\x89corrupt", pxat)

        assert await remote_cache_service.get("users") is None

    @pytest.mark.asyncio
    async def test_unserializable_value_raises(self, remote_cache_service):
        with pytest.raises(CacheSerializationError):
            await remote_cache_service.set("marker", object())

    @pytest.mark.asyncio
    async def test_close_closes_client(self, remote_cache_service, fake_redis):
        await remote_cache_service.close()
        assert fake_redis.closed is True


class TestCacheServiceWiring:
    """Construction and backend selection."""

    def test_backend_must_match_settings(self, fake_redis):
        with pytest.raises(ValueError, match="does not match"):
            CacheService(
                CacheSettings(backend=CacheBackendType.LOCAL),
                RemoteCacheBackend(fake_redis),
            )

    @pytest.mark.asyncio
    async def test_backend_is_called_with_default_ttl(self):
        backend = AsyncMock()
        backend.backend_type = CacheBackendType.LOCAL
        service = CacheService(
            CacheSettings(default_expiration=timedelta(minutes=9)), backend
        )

        await service.set("key", "value")

        backend.set.assert_awaited_once_with(
            CacheKey("key"), "value", timedelta(minutes=9)
        )

    def test_create_local(self):
        service = create_cache_service(CacheSettings(backend=CacheBackendType.LOCAL))

        assert isinstance(service.backend, LocalCacheBackend)
        assert service.backend_type is CacheBackendType.LOCAL

    def test_create_remote(self, fake_redis):
        factory = RedisConnectionFactory("localhost:6379")
        with patch.object(factory, "create_client", return_value=fake_redis):
            service = create_cache_service(
                CacheSettings(backend=CacheBackendType.REMOTE), factory
            )

        assert isinstance(service.backend, RemoteCacheBackend)
        assert service.backend_type is CacheBackendType.REMOTE

    def test_create_remote_builds_factory_from_settings(self):
        settings = CacheSettings(
            backend=CacheBackendType.REMOTE,
            redis_connection_string="cache.internal:6381",
        )
        service = create_cache_service(settings)

        kwargs = service.backend._client.connection_pool.connection_kwargs
        assert kwargs["host"] == "cache.internal"
        assert kwargs["port"] == 6381

    @pytest.mark.asyncio
    @pytest.mark.parametrize("cache_type", [None, "InMemory", "redis"])
    async def test_other_config_keeps_references(self, cache_type):
        settings = Settings(_env_file=None, CACHE_TYPE=cache_type)
        service = create_cache_service(settings.cache_settings)
        value = {"a": [1, 2]}

        await service.set("key", value)

        assert await service.get("key") is value

    @pytest.mark.asyncio
    async def test_redis_config_encodes_values(self, fake_redis):
        settings = Settings(_env_file=None, CACHE_TYPE="Redis")
        factory = RedisConnectionFactory(settings.REDIS_CONNECTION_STRING)
        value = {"a": [1, 2]}

        with patch.object(factory, "create_client", return_value=fake_redis):
            service = create_cache_service(settings.cache_settings, factory)
        await service.set("key", value)
        result = await service.get("key")

        assert fake_redis.data["key"][0] == b'{"a":[1,2]}'
        assert result == value
        assert result is not value
