"""
Redis Connection Factory

Builds the pooled asyncio Redis client used by the remote cache backend.
Accepts either a redis:// URL or a "host:port,option=value" connection
string.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import structlog
from redis.asyncio import ConnectionPool, Redis

from .exceptions import RedisConfigurationException

logger = structlog.get_logger()

DEFAULT_REDIS_PORT = 6379

_TRUE_VALUES = {"true", "1", "yes"}


@dataclass(frozen=True)
class RedisEndpoint:
    """Parsed connection string."""

    host: str = "localhost"
    port: int = DEFAULT_REDIS_PORT
    db: int = 0
    username: Optional[str] = None
    password: Optional[str] = None
    ssl: bool = False
    url: Optional[str] = None
    ignored_options: Dict[str, str] = field(default_factory=dict)


def _parse_port(raw: str, connection_string: str) -> int:
    try:
        port = int(raw)
    except ValueError as e:
        raise RedisConfigurationException(
            message=f"Invalid Redis port: {raw!r}",
            config_key="REDIS_CONNECTION_STRING",
            config_value=connection_string,
            original_error=e,
        )
    if not 0 < port < 65536:
        raise RedisConfigurationException(
            message=f"Redis port out of range: {port}",
            config_key="REDIS_CONNECTION_STRING",
            config_value=connection_string,
        )
    return port


def parse_connection_string(connection_string: str) -> RedisEndpoint:
    """
    Parse a Redis connection string.

    Supported forms:
        redis://[user:password@]host:port/db   (passed through to redis-py)
        host[:port][,password=...][,user=...][,ssl=True][,defaultDatabase=N]

    Raises:
        RedisConfigurationException: If no endpoint is given or a value is invalid
    """
    value = (connection_string or "").strip()
    if "://" in value:
        return RedisEndpoint(url=value)

    parts = [part.strip() for part in value.split(",") if part.strip()]
    endpoints = [part for part in parts if "=" not in part]
    if not endpoints:
        raise RedisConfigurationException(
            message="Redis connection string has no endpoint",
            config_key="REDIS_CONNECTION_STRING",
            config_value=connection_string,
        )

    host, _, raw_port = endpoints[0].rpartition(":")
    if not host:
        host, raw_port = raw_port, ""
    port = _parse_port(raw_port, connection_string) if raw_port else DEFAULT_REDIS_PORT

    options: Dict[str, Any] = {}
    ignored: Dict[str, str] = {}
    for part in parts:
        if "=" not in part:
            continue
        name, _, option_value = part.partition("=")
        name = name.strip().lower()
        option_value = option_value.strip()

        if name == "password":
            options["password"] = option_value
        elif name == "user":
            options["username"] = option_value
        elif name == "ssl":
            options["ssl"] = option_value.lower() in _TRUE_VALUES
        elif name == "defaultdatabase":
            try:
                options["db"] = int(option_value)
            except ValueError as e:
                raise RedisConfigurationException(
                    message=f"Invalid Redis database index: {option_value!r}",
                    config_key="REDIS_CONNECTION_STRING",
                    config_value=connection_string,
                    original_error=e,
                )
        else:
            ignored[name] = option_value

    return RedisEndpoint(host=host, port=port, ignored_options=ignored, **options)


class RedisConnectionFactory:
    """
    Factory for the pooled Redis client.

    The client works on raw bytes (decode_responses=False); encoding is
    the cache backend's job.
    """

    def __init__(
        self,
        connection_string: str,
        max_connections: int = 10,
        socket_timeout: float = 5.0,
    ):
        self.endpoint = parse_connection_string(connection_string)
        self.max_connections = max_connections
        self.socket_timeout = socket_timeout
        self._pool: Optional[ConnectionPool] = None

    def _create_pool(self) -> ConnectionPool:
        common = {
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_timeout,
            "decode_responses": False,
        }
        if self.endpoint.url:
            return ConnectionPool.from_url(self.endpoint.url, **common)

        connection_kwargs: Dict[str, Any] = {
            "host": self.endpoint.host,
            "port": self.endpoint.port,
            "db": self.endpoint.db,
            "username": self.endpoint.username,
            "password": self.endpoint.password,
            **common,
        }
        if self.endpoint.ssl:
            # redis-py selects TLS through the connection class
            from redis.asyncio.connection import SSLConnection

            connection_kwargs["connection_class"] = SSLConnection
        return ConnectionPool(**connection_kwargs)

    def create_client(self) -> Redis:
        """Create a Redis client bound to the shared connection pool."""
        if self._pool is None:
            self._pool = self._create_pool()
            if self.endpoint.ignored_options:
                logger.warning(
                    "Ignoring unsupported Redis connection options",
                    options=sorted(self.endpoint.ignored_options),
                )
            logger.info(
                "Redis connection pool created",
                host=self.endpoint.host if not self.endpoint.url else None,
                port=self.endpoint.port if not self.endpoint.url else None,
                max_connections=self.max_connections,
            )
        return Redis(connection_pool=self._pool)

    async def close(self) -> None:
        """Disconnect all pooled connections."""
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None
            logger.info("Redis connection pool closed")
