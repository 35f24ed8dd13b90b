"""
Cache Domain Exceptions

Contract violations raised by the cache service. Misses, expired entries
and unreadable payloads are never raised; they resolve to None.
"""

from typing import Any, Dict, Optional


class CacheException(Exception):
    """Base exception for cache contract violations."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidCacheKeyError(CacheException, ValueError):
    """Raised when a cache key is empty, whitespace only or not text."""

    def __init__(self, message: str = "Invalid cache key", key: Any = None):
        super().__init__(
            message=message,
            error_code="CACHE_INVALID_KEY",
            details={"key": repr(key)},
        )


class CacheSerializationError(CacheException, TypeError):
    """Raised when a value cannot be encoded for the remote cache."""

    def __init__(
        self,
        key: str,
        value_type: str,
        original_error: Optional[Exception] = None,
    ):
        details = {"key": key, "value_type": value_type}
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=f"Cannot serialize value of type '{value_type}' for cache key '{key}'",
            error_code="CACHE_SERIALIZATION_ERROR",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error
