"""
Pydantic models for listings.

``ListingCreate`` is the validated form payload used both when a
listing is created and when it is edited.  ``ListingRead`` is a stored
listing; its ``owner`` and ``reviews`` are only filled in when the
listing is fetched expanded (detail page).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .review import ReviewRead
from .user import UserRead


class ImageRef(BaseModel):
    """Location of an uploaded image and its identifier in the image service."""

    url: str
    filename: str


class ListingBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=140, examples=["Cozy Beachfront Cottage"])
    description: str = Field(..., min_length=1, max_length=5000)
    price: float = Field(..., ge=0, examples=[1500])
    location: str = Field(..., min_length=1, examples=["Malibu"])


class ListingCreate(ListingBase):
    """Schema for creating or editing a listing."""
    pass


class ListingRead(ListingBase):
    """Schema for a stored listing."""

    id: int
    owner_id: int
    image: Optional[ImageRef] = None
    owner: Optional[UserRead] = None
    reviews: List[ReviewRead] = Field(default_factory=list)
