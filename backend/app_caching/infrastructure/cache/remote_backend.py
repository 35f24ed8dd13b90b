"""
Remote Cache Backend

Redis-backed cache strategy. Values are encoded to JSON bytes with
pydantic before writing and decoded after reading. Reads without a type
return the JSON-native form (dicts, lists, strings, numbers, booleans);
reads with a type are validated strictly against it. Unreadable or
mismatched payloads are cache misses, never errors.
"""

import time
from datetime import timedelta
from typing import Any, Callable, Optional

import pydantic_core
import structlog
from redis.asyncio import Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    TimeoutError as RedisTimeoutError,
)

from ...domain.cache.exceptions import CacheSerializationError
from ...domain.cache.repository_interfaces import CacheBackend
from ...domain.cache.value_objects import CacheBackendType, CacheKey
from ..redis.exceptions import (
    RedisConnectionException,
    RedisOperationTimeoutException,
)
from .type_adapters import type_adapter

logger = structlog.get_logger()


def serialize_value(key: CacheKey, value: Any) -> bytes:
    """Encode a value as UTF-8 JSON.

    Raises:
        CacheSerializationError: If the value has no JSON representation
    """
    try:
        return pydantic_core.to_json(value)
    except (pydantic_core.PydanticSerializationError, TypeError, ValueError) as e:
        raise CacheSerializationError(
            key=key.value, value_type=type(value).__name__, original_error=e
        )


def deserialize_value(data: bytes, value_type: Optional[Any] = None) -> Any:
    """Decode JSON bytes.

    Without value_type the JSON-native value is returned: tuples and sets
    come back as lists, models, dataclasses and mappings as dicts,
    datetimes as ISO strings. With value_type the payload is validated
    in strict mode, so JSON arrays become tuples, objects become models
    or dataclasses and ISO strings become datetimes, but a string is
    never coerced to a number nor a boolean to an int.

    Raises:
        ValueError: If the payload is not valid JSON or does not fit value_type
    """
    if value_type is None or value_type is Any:
        return pydantic_core.from_json(data)
    return type_adapter(value_type).validate_json(data, strict=True)


class RemoteCacheBackend(CacheBackend):
    """
    Redis cache backend.

    Thread and task safety come from the Redis client's connection pool.
    Transport failures propagate as Redis infrastructure exceptions.
    """

    backend_type = CacheBackendType.REMOTE

    def __init__(self, client: Redis, clock: Callable[[], float] = time.time):
        self._client = client
        self._clock = clock

    def _expires_at_ms(self, expiration: timedelta) -> int:
        return int((self._clock() + expiration.total_seconds()) * 1000)

    async def set(self, key: CacheKey, value: Any, expiration: timedelta) -> None:
        payload = serialize_value(key, value)
        expires_at_ms = self._expires_at_ms(expiration)

        try:
            await self._client.set(key.value, payload, pxat=expires_at_ms)
        except RedisTimeoutError as e:
            raise RedisOperationTimeoutException(
                operation="set", key=key.value, original_error=e
            )
        except RedisConnectionError as e:
            raise RedisConnectionException(
                message=f"Redis write failed for key {key.value}",
                key=key.value,
                original_error=e,
            )

        logger.debug(
            "Remote cache entry stored",
            key=key.value,
            size_bytes=len(payload),
            expires_at_ms=expires_at_ms,
        )

    async def get(self, key: CacheKey, value_type: Optional[Any] = None) -> Any:
        try:
            data = await self._client.get(key.value)
        except RedisTimeoutError as e:
            raise RedisOperationTimeoutException(
                operation="get", key=key.value, original_error=e
            )
        except RedisConnectionError as e:
            raise RedisConnectionException(
                message=f"Redis read failed for key {key.value}",
                key=key.value,
                original_error=e,
            )

        if not data:
            return None

        try:
            return deserialize_value(data, value_type)
        except ValueError as e:
            # pydantic ValidationError and JSON decode errors are both ValueErrors
            logger.warning(
                "cache_payload_unreadable",
                key=key.value,
                expected_type=repr(value_type),
                error=str(e),
            )
            return None

    async def close(self) -> None:
        await self._client.aclose()
