"""
App Caching Application Configuration

Configuration management with environment variable support.
Cache settings are read once at startup and distilled into an
immutable CacheSettings value passed to the cache service.
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.cache.value_objects import CacheBackendType, Expiration

# Load environment variables from .env file
load_dotenv()


DEFAULT_REDIS_CONNECTION_STRING = "localhost:6379"


class Settings(BaseSettings):
    """Application settings with validation and secure defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Environment settings
    ENVIRONMENT: str = Field(
        default="development", description="Application environment"
    )

    # Database configuration
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./app_caching.db",
        description="SQLAlchemy async database URL",
    )
    SEED_USER_COUNT: int = Field(
        default=1000, ge=0, le=100000, description="Users generated on first start"
    )

    # Cache configuration. Kept as raw text: unrecognised values fall back
    # to the local backend and the default expiration instead of failing.
    CACHE_TYPE: Optional[str] = Field(
        default=None, description="Cache backend selector ('Redis' selects Redis)"
    )
    CACHE_EXPIRATION_TIME: Optional[str] = Field(
        default=None, description="Default cache expiration in minutes"
    )
    LOCAL_CACHE_MAX_ENTRIES: int = Field(
        default=10000, ge=1, le=1000000, description="In-process cache capacity"
    )

    # Redis configuration
    REDIS_CONNECTION_STRING: str = Field(
        default=DEFAULT_REDIS_CONNECTION_STRING,
        description="Redis address (host:port[,options] or redis:// URL)",
    )
    REDIS_MAX_CONNECTIONS: int = Field(
        default=10, ge=1, le=50, description="Redis connection pool size"
    )
    REDIS_SOCKET_TIMEOUT: float = Field(
        default=5.0, gt=0, le=60, description="Redis socket timeout in seconds"
    )

    # API configuration
    API_HOST: str = Field(default="0.0.0.0", description="API server host")
    API_PORT: int = Field(default=8000, ge=1, le=65535, description="API server port")

    # Development and debugging
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of: {allowed}")
        return v.upper()

    @field_validator("REDIS_CONNECTION_STRING")
    @classmethod
    def validate_redis_connection_string(cls, v):
        """Blank connection strings fall back to the local default."""
        return v.strip() or DEFAULT_REDIS_CONNECTION_STRING

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def cache_settings(self) -> "CacheSettings":
        """Immutable cache configuration derived from these settings."""
        return CacheSettings.from_settings(self)


@dataclass(frozen=True)
class CacheSettings:
    """Cache configuration fixed at service startup."""

    backend: CacheBackendType = CacheBackendType.LOCAL
    default_expiration: timedelta = Expiration.DEFAULT
    redis_connection_string: str = DEFAULT_REDIS_CONNECTION_STRING
    local_max_entries: int = 10000

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheSettings":
        return cls(
            backend=CacheBackendType.from_config(settings.CACHE_TYPE),
            default_expiration=Expiration.from_minutes_config(
                settings.CACHE_EXPIRATION_TIME
            ),
            redis_connection_string=settings.REDIS_CONNECTION_STRING,
            local_max_entries=settings.LOCAL_CACHE_MAX_ENTRIES,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
