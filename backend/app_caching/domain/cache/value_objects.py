"""
Cache Value Objects

Immutable value objects for the cache domain: keys, expirations and
backend selection.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Optional

from .exceptions import InvalidCacheKeyError

# Exact, case-sensitive configuration marker for the remote backend
REDIS_BACKEND_MARKER = "Redis"


class CacheBackendType(str, Enum):
    """Storage backend behind the cache service."""

    LOCAL = "local"
    REMOTE = "remote"

    @classmethod
    def from_config(cls, value: Optional[str]) -> "CacheBackendType":
        """Select the backend from the raw configuration value.

        Only the exact marker selects Redis; anything else, including a
        missing value, selects the local in-process cache.
        """
        if value == REDIS_BACKEND_MARKER:
            return cls.REMOTE
        return cls.LOCAL


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    A key is any non-empty text that is not whitespace only.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate cache key."""
        if not isinstance(self.value, str):
            raise InvalidCacheKeyError(
                f"Cache key must be a string, got {type(self.value).__name__}",
                key=self.value,
            )
        if not self.value.strip():
            raise InvalidCacheKeyError(
                "Cache key cannot be empty or whitespace", key=self.value
            )

    @classmethod
    def of(cls, key: Any) -> "CacheKey":
        """Coerce a raw key or an existing CacheKey."""
        if isinstance(key, CacheKey):
            return key
        return cls(key)

    def __str__(self) -> str:
        return self.value


class Expiration:
    """Expiration policy helpers."""

    DEFAULT = timedelta(minutes=5)

    @classmethod
    def from_minutes_config(cls, value: Optional[str]) -> timedelta:
        """Parse a configured number of minutes, falling back to the default."""
        if value is None:
            return cls.DEFAULT
        try:
            minutes = int(str(value).strip())
        except ValueError:
            return cls.DEFAULT
        # A non-positive lifetime would never store anything
        if minutes <= 0:
            return cls.DEFAULT
        return timedelta(minutes=minutes)

    @staticmethod
    def resolve(
        expiration: Optional[timedelta], default: timedelta
    ) -> timedelta:
        """Per-call expiration, or the configured default when omitted.

        Raises:
            ValueError: If the expiration is not a positive timedelta
        """
        if expiration is None:
            return default
        if not isinstance(expiration, timedelta):
            raise ValueError(
                f"Expiration must be a timedelta, got {type(expiration).__name__}"
            )
        if expiration <= timedelta(0):
            raise ValueError("Expiration must be positive")
        return expiration
