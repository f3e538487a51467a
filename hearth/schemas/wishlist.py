"""Wishlist Pydantic schemas."""

from datetime import datetime

from pydantic import AliasChoices, Field

from hearth.schemas.common import CamelModel
from hearth.schemas.property import PropertySummary


class WishlistAdd(CamelModel):
    notes: str | None = Field(default=None, max_length=500)


class WishlistItemResponse(CamelModel):
    """A saved property with the caller's notes."""

    id: int
    parent_property: PropertySummary = Field(
        validation_alias=AliasChoices("parent_property", "property"),
        serialization_alias="property",
    )
    notes: str | None = None
    created_at: datetime


class WishlistItemDetail(CamelModel):
    wishlist_item: WishlistItemResponse
