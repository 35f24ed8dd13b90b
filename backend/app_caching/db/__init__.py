"""
App Caching Database Package

Re-exports the database manager and the declarative Base, and provides
first-start seeding of the user store.
"""

from ..core.database import DatabaseManager
from ..models import Base
from .seed import seed_users

__all__ = [
    "Base",
    "DatabaseManager",
    "seed_users",
]
