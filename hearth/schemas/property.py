"""Property Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator

from hearth.models.enums import Amenity, AreaUnit, Furnishing, ListingType, PropertyType
from hearth.schemas.common import CamelModel
from hearth.schemas.user import UserSummary


class AreaSchema(CamelModel):
    """Listed area and its unit."""

    value: float = Field(gt=0)
    unit: AreaUnit = AreaUnit.SQFT


class CoordinatesSchema(CamelModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class LocationSchema(CamelModel):
    """Postal location with optional coordinates."""

    address: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    pincode: str = Field(pattern=r"^[1-9][0-9]{5}$")
    coordinates: CoordinatesSchema | None = None


class ImageSchema(CamelModel):
    id: str
    url: str


class PropertyBase(CamelModel):
    """Fields shared by create requests and responses."""

    title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=20, max_length=2000)
    property_type: PropertyType
    listing_type: ListingType
    price: float = Field(ge=0)
    area: AreaSchema
    bedrooms: int | None = Field(default=None, ge=0, le=20)
    bathrooms: int | None = Field(default=None, ge=0, le=20)
    location: LocationSchema
    amenities: list[Amenity] = []
    images: list[ImageSchema] = []
    furnished: Furnishing | None = None
    parking: int = Field(default=0, ge=0)


class PropertyCreate(PropertyBase):
    """Schema for creating a listing."""

    agent_id: int | None = None


class PropertyUpdate(CamelModel):
    """Schema for updating a listing. Status changes go through moderation."""

    title: str | None = Field(default=None, min_length=5, max_length=100)
    description: str | None = Field(default=None, min_length=20, max_length=2000)
    property_type: PropertyType | None = None
    listing_type: ListingType | None = None
    price: float | None = Field(default=None, ge=0)
    area: AreaSchema | None = None
    bedrooms: int | None = Field(default=None, ge=0, le=20)
    bathrooms: int | None = Field(default=None, ge=0, le=20)
    location: LocationSchema | None = None
    amenities: list[Amenity] | None = None
    images: list[ImageSchema] | None = None
    furnished: Furnishing | None = None
    parking: int | None = Field(default=None, ge=0)
    agent_id: int | None = None


class PropertyResponse(PropertyBase):
    """Schema for a hydrated listing."""

    id: int
    status: str
    featured: bool
    verified: bool
    views: int
    price_per_sqft: int | None = None
    owner: UserSummary
    agent: UserSummary | None = None
    created_at: datetime
    updated_at: datetime

    # Relax request-side limits so stored rows always serialize
    title: str
    description: str

    @field_validator("amenities", mode="before")
    @classmethod
    def _amenities_as_list(cls, value: Any) -> list:
        return list(value or [])

    @field_validator("images", mode="before")
    @classmethod
    def _images_default(cls, value: Any) -> list:
        return list(value or [])


class PropertySummary(CamelModel):
    """Listing fields shown alongside an inquiry or a wishlist entry."""

    id: int
    title: str
    property_type: PropertyType
    listing_type: ListingType
    price: float
    status: str
    location: LocationSchema
    images: list[ImageSchema] = []


class PropertyDetail(CamelModel):
    property: PropertyResponse


class ModerationRequest(CamelModel):
    """Admin decision on a listing."""

    action: Literal["approve", "reject"]
