"""
Cache Service

Consumer-facing cache API. Validates keys, applies the default
expiration and delegates every call to the backend selected once at
startup (in-process or Redis).
"""

from datetime import timedelta
from typing import Any, Optional, Union

import structlog
from opentelemetry import trace

from ...core.config import CacheSettings
from ...domain.cache.repository_interfaces import CacheBackend
from ...domain.cache.value_objects import CacheBackendType, CacheKey, Expiration
from ...infrastructure.cache.local_backend import LocalCacheBackend
from ...infrastructure.cache.remote_backend import RemoteCacheBackend
from ...infrastructure.redis.connection_factory import RedisConnectionFactory
from ...monitoring.cache_metrics import record_cache_get, record_cache_set

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)


class CacheService:
    """
    Cache-aside store over a single backend.

    The service holds only immutable configuration, so it can be shared
    by any number of concurrent callers; synchronization belongs to the
    backend. A miss, an expired entry and an unreadable entry all read
    as None. Only an invalid key raises.
    """

    def __init__(self, settings: CacheSettings, backend: CacheBackend):
        if backend.backend_type != settings.backend:
            raise ValueError(
                f"Backend {backend.backend_type.value} does not match "
                f"configured cache type {settings.backend.value}"
            )
        self.settings = settings
        self.backend = backend

    @property
    def backend_type(self) -> CacheBackendType:
        return self.settings.backend

    @property
    def default_expiration(self) -> timedelta:
        return self.settings.default_expiration

    async def set(
        self,
        key: Union[str, CacheKey],
        value: Any,
        expiration: Optional[timedelta] = None,
    ) -> bool:
        """
        Store a value under key.

        Args:
            key: Non-empty cache key
            value: Value to store; must be JSON-serializable for Redis
            expiration: Lifetime of the entry (configured default if omitted)

        Returns:
            True once the backend accepted the write

        Raises:
            InvalidCacheKeyError: If key is empty or whitespace
            CacheSerializationError: If the Redis backend cannot encode value
        """
        cache_key = CacheKey.of(key)
        ttl = Expiration.resolve(expiration, self.default_expiration)

        with tracer.start_as_current_span("cache_service.set") as span:
            span.set_attribute("cache.key", cache_key.value)
            span.set_attribute("cache.backend", self.backend_type.value)
            span.set_attribute("cache.ttl_seconds", ttl.total_seconds())

            await self.backend.set(cache_key, value, ttl)
            record_cache_set(self.backend_type.value)

        return True

    async def get(
        self, key: Union[str, CacheKey], value_type: Optional[Any] = None
    ) -> Any:
        """
        Get a cached value.

        The local backend returns the stored object itself. The Redis
        backend returns a decoded copy: without value_type that copy is
        JSON-native (a stored tuple reads back as a list, a dataclass or
        model as a dict), so pass value_type to get the original shape.

        Args:
            key: Non-empty cache key
            value_type: Expected type, checked strictly; entries that do
                not fit it are misses

        Returns:
            The cached value, or None if absent, expired, unreadable or
            of the wrong type

        Raises:
            InvalidCacheKeyError: If key is empty or whitespace
        """
        cache_key = CacheKey.of(key)

        with tracer.start_as_current_span("cache_service.get") as span:
            span.set_attribute("cache.key", cache_key.value)
            span.set_attribute("cache.backend", self.backend_type.value)

            value = await self.backend.get(cache_key, value_type)
            hit = value is not None
            span.set_attribute("cache.hit", hit)
            record_cache_get(self.backend_type.value, hit)

        logger.debug(
            "Cache lookup",
            key=cache_key.value,
            backend=self.backend_type.value,
            hit=hit,
        )
        return value

    async def close(self) -> None:
        """Release backend resources."""
        await self.backend.close()


def create_cache_service(
    settings: CacheSettings,
    redis_factory: Optional[RedisConnectionFactory] = None,
) -> CacheService:
    """
    Build the cache service for the configured backend.

    Args:
        settings: Cache configuration fixed at startup
        redis_factory: Client factory for the Redis backend (built from
            settings.redis_connection_string when omitted)
    """
    if settings.backend == CacheBackendType.REMOTE:
        factory = redis_factory or RedisConnectionFactory(
            settings.redis_connection_string
        )
        backend: CacheBackend = RemoteCacheBackend(factory.create_client())
    else:
        backend = LocalCacheBackend(max_entries=settings.local_max_entries)

    logger.info(
        "Cache service configured",
        backend=settings.backend.value,
        default_expiration_seconds=settings.default_expiration.total_seconds(),
    )
    return CacheService(settings, backend)
