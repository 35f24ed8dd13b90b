"""
FastAPI dependencies.

Startup wiring lives on app.state; these helpers hand request-scoped
collaborators to the endpoints.
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..core.database import DatabaseManager
from ..repositories.user import UserRepository
from ..services.cache.cache_service import CacheService
from ..services.users.user_service import UserService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database_manager(request: Request) -> DatabaseManager:
    return request.app.state.database


async def get_database_session(
    database: DatabaseManager = Depends(get_database_manager),
) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped database session."""
    async for session in database.session():
        yield session


def get_cache_service(request: Request) -> CacheService:
    return request.app.state.cache_service


def get_user_service(
    session: AsyncSession = Depends(get_database_session),
    cache: CacheService = Depends(get_cache_service),
) -> UserService:
    return UserService(UserRepository(session), cache)
