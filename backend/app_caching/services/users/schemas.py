"""
User Schemas

Pydantic representation of user records, shared by the cache and the API.
"""

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    """Schema for reading users."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str = Field(..., min_length=1, max_length=100, description="Full name")
    email: str = Field(..., min_length=1, max_length=200, description="Email address")
