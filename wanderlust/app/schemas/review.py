"""
Pydantic schemas for listing reviews.

A review is a comment plus a 1..5 rating written by one user about one
listing.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .user import UserRead


class ReviewCreate(BaseModel):
    """Schema for posting a new review."""

    model_config = ConfigDict(str_strip_whitespace=True)

    comment: str = Field(..., min_length=1, max_length=1000)
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")


class ReviewRead(BaseModel):
    """Schema for a stored review."""

    id: int
    comment: str
    rating: int
    author_id: int
    author: Optional[UserRead] = None
    created_at: Optional[str] = None
