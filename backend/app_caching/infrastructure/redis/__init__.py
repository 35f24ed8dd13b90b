"""
Redis Infrastructure Module

Connection management and exceptions for the Redis cache backend.

This module provides:
- RedisConnectionFactory: Pooled client creation from a connection string
- Redis transport exceptions
"""

from .connection_factory import (
    RedisConnectionFactory,
    RedisEndpoint,
    parse_connection_string,
)
from .exceptions import (
    RedisException,
    RedisConnectionException,
    RedisOperationTimeoutException,
    RedisConfigurationException,
)

__all__ = [
    # Connection management
    "RedisConnectionFactory",
    "RedisEndpoint",
    "parse_connection_string",
    # Exceptions
    "RedisException",
    "RedisConnectionException",
    "RedisOperationTimeoutException",
    "RedisConfigurationException",
]
