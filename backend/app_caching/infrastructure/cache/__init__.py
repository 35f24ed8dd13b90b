"""
Cache Backends

Storage strategies behind the cache service.
"""

from .local_backend import LocalCacheBackend
from .remote_backend import RemoteCacheBackend

__all__ = [
    "LocalCacheBackend",
    "RemoteCacheBackend",
]
