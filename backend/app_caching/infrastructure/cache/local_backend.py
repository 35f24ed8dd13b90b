"""
Local Cache Backend

In-process cache built on cachetools' time-aware LRU store. Every entry
carries its own expiration, measured from the moment it was written.
Values are kept by reference: no copy, no encoding.
"""

import threading
import time
import types
from datetime import timedelta
from typing import Any, Callable, NamedTuple, Optional, Union, get_args, get_origin

import structlog
from cachetools import TLRUCache
from pydantic import PydanticSchemaGenerationError, ValidationError

from ...domain.cache.repository_interfaces import CacheBackend
from ...domain.cache.value_objects import CacheBackendType, CacheKey
from .type_adapters import type_adapter

logger = structlog.get_logger()


class _LocalEntry(NamedTuple):
    value: Any
    ttl_seconds: float


def _entry_expires_at(key: str, entry: _LocalEntry, now: float) -> float:
    return now + entry.ttl_seconds


def _matches_origin(value: Any, value_type: Any) -> bool:
    origin = get_origin(value_type)
    if origin is Union or origin is types.UnionType:
        return any(_matches_origin(value, arg) for arg in get_args(value_type))

    target = origin or value_type
    if isinstance(target, type):
        return isinstance(value, target)
    return True


def matches_type(value: Any, value_type: Optional[Any]) -> bool:
    """
    Check a stored object against a requested type.

    Uses pydantic strict validation, the same rule the Redis backend
    applies to decoded payloads: ``[True]`` is not a ``List[int]`` and
    ``"42"`` is not an ``int``. Types pydantic cannot build a schema for
    fall back to an isinstance check on their origin class.
    """
    if value_type is None or value_type is Any:
        return True

    try:
        adapter = type_adapter(value_type)
    except (PydanticSchemaGenerationError, TypeError):
        return _matches_origin(value, value_type)

    try:
        adapter.validate_python(value, strict=True)
    except ValidationError:
        return False
    return True


class LocalCacheBackend(CacheBackend):
    """
    In-process cache backend.

    cachetools stores are not thread-safe, so all access goes through
    a lock. Operations never block on I/O.
    """

    backend_type = CacheBackendType.LOCAL

    def __init__(
        self,
        max_entries: int = 10000,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._store: TLRUCache = TLRUCache(
            maxsize=max_entries, ttu=_entry_expires_at, timer=timer
        )
        self._lock = threading.Lock()

    async def set(self, key: CacheKey, value: Any, expiration: timedelta) -> None:
        entry = _LocalEntry(value, expiration.total_seconds())
        with self._lock:
            self._store[key.value] = entry

        logger.debug(
            "Local cache entry stored",
            key=key.value,
            ttl_seconds=entry.ttl_seconds,
        )

    async def get(self, key: CacheKey, value_type: Optional[Any] = None) -> Any:
        with self._lock:
            entry = self._store.get(key.value)

        if entry is None:
            return None

        if not matches_type(entry.value, value_type):
            logger.warning(
                "cache_type_mismatch",
                key=key.value,
                expected_type=repr(value_type),
                actual_type=type(entry.value).__name__,
            )
            return None

        return entry.value

    def __len__(self) -> int:
        with self._lock:
            self._store.expire()
            return len(self._store)
