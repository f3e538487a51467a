"""User Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from hearth.schemas.common import CamelModel


class UserCreate(CamelModel):
    """Schema for registering a user profile.

    Admins are provisioned out of band (see scripts/seed_data.py).
    """

    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=20)
    role: Literal["buyer", "seller", "agent"] = "buyer"


class UserSummary(CamelModel):
    """Display summary embedded in listings and inquiries."""

    id: int
    first_name: str
    last_name: str
    name: str
    email: str
    phone: str | None = None


class UserResponse(UserSummary):
    """Schema for the caller's own profile."""

    role: str
    created_at: datetime
    is_active: bool
