"""
User Service

Lists users through the cache: read the cache first and, on a miss,
load from the user store and write the result back.
"""

from typing import Any, List, Protocol, Sequence

import structlog
from opentelemetry import trace

from ..cache.cache_service import CacheService
from .schemas import UserRead

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

ALL_USERS_CACHE_KEY = "all_users"


class UserStore(Protocol):
    """Source of truth for user records."""

    async def list_all(self) -> Sequence[Any]: ...


class UserService:
    """
    User listing with cache-aside reads.

    Concurrent misses may each reload and overwrite the entry; there is
    no single-flight protection.
    """

    def __init__(self, store: UserStore, cache: CacheService):
        self.store = store
        self.cache = cache

    async def get_all_users(self) -> List[UserRead]:
        """
        Retrieve all users, caching the result for subsequent requests.

        Returns:
            Every user in the store
        """
        with tracer.start_as_current_span("user_service.get_all_users") as span:
            users = await self.cache.get(ALL_USERS_CACHE_KEY, List[UserRead])
            if users is not None:
                span.set_attribute("cache.hit", True)
                return users

            span.set_attribute("cache.hit", False)
            records = await self.store.list_all()
            users = [UserRead.model_validate(record) for record in records]

            await self.cache.set(ALL_USERS_CACHE_KEY, users)
            span.set_attribute("users.count", len(users))

            logger.info(
                "Users loaded from store",
                count=len(users),
                backend=self.cache.backend_type.value,
            )
            return users
