"""
User Repository

Read access to the relational user store.
"""

from typing import Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import User

logger = structlog.get_logger()


class UserRepository:
    """Repository for user records."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with strict input validation.

        Raises:
            TypeError: If session is not an AsyncSession
        """
        if not isinstance(session, AsyncSession):
            raise TypeError(
                f"session must be AsyncSession instance, got {type(session).__name__}"
            )
        self.session = session

    async def list_all(self) -> Sequence[User]:
        """
        Fetch every user record.

        Returns:
            All users ordered by id
        """
        try:
            result = await self.session.execute(select(User).order_by(User.id))
            users = result.scalars().all()

            logger.debug("UserRepository: Users retrieved", count=len(users))
            return users

        except Exception as e:
            logger.error(
                "UserRepository: Failed to list users",
                error=str(e),
                exc_info=True,
            )
            raise
