"""
Repository Pattern Implementation

All data access to the relational store goes through repositories.
"""

from .user import UserRepository

__all__ = [
    "UserRepository",
]
