"""Inquiry Pydantic schemas for request/response validation."""

import datetime as dt
from typing import Annotated

from pydantic import AliasChoices, Field, StringConstraints

from hearth.models.enums import ContactPreference, InquiryType, MeetingType
from hearth.schemas.common import CamelModel
from hearth.schemas.property import PropertySummary
from hearth.schemas.user import UserSummary

InquiryMessage = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=1000)]


class PreferredTimeSchema(CamelModel):
    date: dt.date | None = None
    time: str | None = Field(default=None, max_length=20)


class InquiryCreate(CamelModel):
    """Schema for sending an inquiry about a listing."""

    property_id: int
    type: InquiryType
    message: InquiryMessage
    contact_preference: ContactPreference = ContactPreference.PHONE
    preferred_time: PreferredTimeSchema | None = None


class RespondRequest(CamelModel):
    message: str | None = None


class ScheduleRequest(CamelModel):
    """Meeting details proposed by the property owner."""

    date: dt.date | None = None
    time: str | None = Field(default=None, max_length=20)
    location: str | None = Field(default=None, max_length=255)
    type: MeetingType | None = None


class StatusRequest(CamelModel):
    status: str | None = None


class FeedbackRequest(CamelModel):
    rating: int = Field(ge=1, le=5)
    feedback: str | None = Field(default=None, max_length=500)


class ReplySchema(CamelModel):
    message: str
    responded_at: dt.datetime
    responded_by: int | None = None


class MeetingSchema(CamelModel):
    date: dt.date
    time: str
    location: str
    type: MeetingType


class InquiryResponse(CamelModel):
    """Schema for a hydrated inquiry."""

    id: int
    # ORM relationship is parent_property; the wire name is "property"
    parent_property: PropertySummary = Field(
        validation_alias=AliasChoices("parent_property", "property"),
        serialization_alias="property",
    )
    inquirer: UserSummary
    property_owner: UserSummary
    type: InquiryType
    message: str
    contact_preference: ContactPreference
    preferred: PreferredTimeSchema | None = Field(
        default=None,
        validation_alias=AliasChoices("preferred", "preferredTime"),
        serialization_alias="preferredTime",
    )
    status: str
    response: ReplySchema | None = None
    meeting_scheduled: MeetingSchema | None = None
    rating: int | None = None
    feedback: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class InquiryDetail(CamelModel):
    inquiry: InquiryResponse
