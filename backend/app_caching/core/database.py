"""
App Caching Database Configuration

Async database connection management:
- Engine creation with retry and exponential backoff
- Schema creation from model metadata
- Session factory for request-scoped sessions
"""

import time
from typing import AsyncGenerator, Optional

import structlog
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from .config import Settings, get_settings
from ..models import Base

logger = structlog.get_logger()


class DatabaseManager:
    """
    Database connection manager.

    Owns the async engine and session factory for the process.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    def _engine_options(self) -> dict:
        options = {"echo": self.settings.DEBUG, "future": True}
        if not self.settings.DATABASE_URL.startswith("sqlite"):
            options.update(pool_size=10, max_overflow=20, pool_pre_ping=True)
        return options

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((OperationalError, ConnectionError)),
        before_sleep=lambda retry_state: logger.warning(
            "Database connection retry",
            attempt=retry_state.attempt_number,
            wait_time=retry_state.next_action.sleep,
        ),
        reraise=True,
    )
    async def _create_schema(self, engine: AsyncEngine) -> None:
        """Create tables, retrying while the database is unreachable."""
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def initialize(self) -> None:
        """Create the engine, the schema and the session factory."""
        if self.engine is not None:
            return

        start_time = time.time()
        engine = create_async_engine(self.settings.DATABASE_URL, **self._engine_options())

        try:
            await self._create_schema(engine)
        except Exception as e:
            logger.error(
                "Failed to initialize database",
                error=str(e),
                duration_seconds=time.time() - start_time,
            )
            await engine.dispose()
            raise

        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine, class_=AsyncSession, expire_on_commit=False
        )
        logger.info(
            "Database initialized",
            dialect=engine.dialect.name,
            duration_seconds=time.time() - start_time,
        )

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session, rolling back on error."""
        if self.session_factory is None:
            raise RuntimeError("Database not initialized - call initialize() first")

        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose of the engine and its connections."""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database connections closed")
