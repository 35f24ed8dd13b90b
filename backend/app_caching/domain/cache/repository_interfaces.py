"""
Cache Backend Interfaces

Abstract contract shared by the cache storage strategies.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Optional

from .value_objects import CacheBackendType, CacheKey


class CacheBackend(ABC):
    """
    Keyed store with expiration.

    Implementations provide their own synchronization for concurrent
    callers. Keys arrive already validated by the cache service.
    """

    backend_type: CacheBackendType

    @abstractmethod
    async def set(self, key: CacheKey, value: Any, expiration: timedelta) -> None:
        """Store value under key, overwriting any existing entry."""
        pass

    @abstractmethod
    async def get(self, key: CacheKey, value_type: Optional[Any] = None) -> Any:
        """Return the stored value, or None when absent, expired or unreadable."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
