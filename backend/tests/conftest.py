"""
Main pytest configuration for backend tests.

Fixtures and test doubles shared by the unit tests.
"""

import os

import pytest

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ.pop("CACHE_TYPE", None)
os.environ.pop("CACHE_EXPIRATION_TIME", None)

from app_caching.core.config import CacheSettings  # noqa: E402
from app_caching.domain.cache.value_objects import CacheBackendType  # noqa: E402
from app_caching.infrastructure.cache.local_backend import LocalCacheBackend  # noqa: E402
from app_caching.infrastructure.cache.remote_backend import RemoteCacheBackend  # noqa: E402
from app_caching.services.cache.cache_service import CacheService  # noqa: E402


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    """In-memory stand-in for the byte-oriented asyncio Redis client."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.data = {}
        self.closed = False

    async def set(self, key, value, pxat=None):
        assert isinstance(value, bytes)
        self.data[key] = (value, pxat)
        return True

    async def get(self, key):
        entry = self.data.get(key)
        if entry is None:
            return None
        value, pxat = entry
        if pxat is not None and self.clock() * 1000 >= pxat:
            del self.data[key]
            return None
        return value

    async def aclose(self):
        self.closed = True


@pytest.fixture
def clock():
    """Controllable clock shared by backends and fakes."""
    return FakeClock()


@pytest.fixture
def fake_redis(clock):
    """Fake Redis client."""
    return FakeRedis(clock)


@pytest.fixture
def local_cache_service(clock):
    """Cache service over the in-process backend."""
    return CacheService(
        CacheSettings(backend=CacheBackendType.LOCAL),
        LocalCacheBackend(timer=clock),
    )


@pytest.fixture
def remote_cache_service(fake_redis, clock):
    """Cache service over the Redis backend with a fake client."""
    return CacheService(
        CacheSettings(backend=CacheBackendType.REMOTE),
        RemoteCacheBackend(fake_redis, clock=clock),
    )


@pytest.fixture(params=["local", "remote"])
def cache_service(request, local_cache_service, remote_cache_service):
    """Cache service parametrised over both backends."""
    if request.param == "local":
        return local_cache_service
    return remote_cache_service


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "redis: marks tests as Redis-related")
