"""
App Caching Backend - Main FastAPI Application

Lists users from the relational store through a cache layer that is
either in-process or Redis, chosen once at startup from configuration.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from opentelemetry import trace

from .api.endpoints.health import router as health_router
from .api.endpoints.users import router as users_router
from .core.config import Settings, get_settings
from .core.database import DatabaseManager
from .core.logging import configure_logging
from .db.seed import seed_users
from .domain.cache.value_objects import CacheBackendType
from .infrastructure.redis.connection_factory import RedisConnectionFactory
from .services.cache.cache_service import create_cache_service

logger = structlog.get_logger()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application for the given settings."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: database, seed data and cache service."""
        configure_logging(settings)
        cache_settings = settings.cache_settings
        logger.info(
            "Starting App Caching API",
            environment=settings.ENVIRONMENT,
            cache_backend=cache_settings.backend.value,
        )

        database = DatabaseManager(settings)
        await database.initialize()
        await seed_users(database.session_factory, settings.SEED_USER_COUNT)

        redis_factory = None
        if cache_settings.backend == CacheBackendType.REMOTE:
            redis_factory = RedisConnectionFactory(
                cache_settings.redis_connection_string,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            )

        app.state.settings = settings
        app.state.database = database
        app.state.cache_service = create_cache_service(cache_settings, redis_factory)

        yield

        logger.info("Shutting down App Caching API")
        try:
            await app.state.cache_service.close()
            if redis_factory is not None:
                await redis_factory.close()
        finally:
            await database.close()

    app = FastAPI(
        title="App Caching API",
        description="User listing with in-memory or Redis caching",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(users_router, tags=["users"])
    app.include_router(health_router, tags=["health"])

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Report any unhandled failure as a plain-text 500."""
        span = trace.get_current_span()
        span.set_attribute("error.type", type(exc).__name__)
        span.set_attribute("error.path", request.url.path)

        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return PlainTextResponse(
            f"Internal server error: {exc}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
