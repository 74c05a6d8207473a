"""
Pydantic models for user data.

``UserCreate`` is the signup payload; ``UserRead`` is what the rest of
the application sees of a user.  The password hash never leaves the
user service.
"""

from pydantic import BaseModel, ConfigDict, Field


class UserBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(..., min_length=1, examples=["alice"])
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$", examples=["a@x.com"])


class UserCreate(UserBase):
    """Schema for signing up."""

    password: str = Field(..., min_length=1)


class UserRead(UserBase):
    """Schema for reading a user."""

    id: int

    model_config = ConfigDict(from_attributes=True)
