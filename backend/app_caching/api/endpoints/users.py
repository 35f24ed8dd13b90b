"""
Users API endpoints

Lists users through the cache-aside user service.
"""

from typing import List, Union

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from ..dependencies import get_user_service
from ...services.users.schemas import UserRead
from ...services.users.user_service import UserService

logger = structlog.get_logger()
router = APIRouter(prefix="/api/user")


@router.get(
    "",
    response_model=List[UserRead],
    responses={500: {"description": "Unexpected failure", "content": {"text/plain": {}}}},
)
async def get_all_users(
    user_service: UserService = Depends(get_user_service),
) -> Union[List[UserRead], PlainTextResponse]:
    """
    Retrieve all users, caching the result for subsequent requests.

    Any failure along the request path is reported as a 500 with the
    exception message.
    """
    try:
        return await user_service.get_all_users()
    except Exception as e:
        logger.exception("Failed to list users", error=str(e))
        return PlainTextResponse(
            f"Internal server error: {e}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
