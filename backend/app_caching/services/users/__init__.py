"""
User Services

Cache-aside user listing.
"""

from .schemas import UserRead
from .user_service import ALL_USERS_CACHE_KEY, UserService, UserStore

__all__ = [
    "ALL_USERS_CACHE_KEY",
    "UserRead",
    "UserService",
    "UserStore",
]
