"""Inquiry database model - a buyer's request to a property owner."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hearth.core.database import Base
from hearth.models.enums import (
    OPEN_INQUIRY_STATUSES,
    ContactPreference,
    InquiryStatus,
    MeetingType,
)

if TYPE_CHECKING:
    from hearth.models.property import Property
    from hearth.models.user import User

_OPEN_STATUS_SQL = "status IN ({})".format(
    ", ".join(f"'{s.value}'" for s in sorted(OPEN_INQUIRY_STATUSES, key=lambda s: s.value))
)


@dataclass(frozen=True)
class PreferredTime:
    date: date | None
    time: str | None


@dataclass(frozen=True)
class InquiryReply:
    message: str
    responded_at: datetime
    responded_by: int | None


@dataclass(frozen=True)
class Meeting:
    date: date
    time: str
    location: str
    type: str


class Inquiry(Base):
    """Inquiry entity.

    At most one open (pending/contacted/scheduled) inquiry may exist per
    inquirer and property; the partial unique index below enforces it at
    the storage layer.
    """

    __tablename__ = "inquiries"
    __table_args__ = (
        Index(
            "ux_inquiries_open_pair",
            "inquirer_id",
            "property_id",
            unique=True,
            sqlite_where=text(_OPEN_STATUS_SQL),
            postgresql_where=text(_OPEN_STATUS_SQL),
        ),
        Index("ix_inquiries_owner_status", "property_owner_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Foreign keys
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)
    inquirer_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    # Captured from the property at creation time; not updated on ownership transfer
    property_owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    type: Mapped[str] = mapped_column(String(20))
    message: Mapped[str] = mapped_column(Text)
    contact_preference: Mapped[str] = mapped_column(
        String(20),
        default=ContactPreference.PHONE.value,
    )
    preferred_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    preferred_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        default=InquiryStatus.PENDING.value,
        index=True,
    )

    # Response (set once contacted)
    response_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(nullable=True)
    responded_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    # Meeting (set once scheduled)
    meeting_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    meeting_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    meeting_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meeting_type: Mapped[str | None] = mapped_column(String(20), nullable=True)

    rating: Mapped[int | None] = mapped_column(nullable=True)
    feedback: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    parent_property: Mapped["Property"] = relationship()
    inquirer: Mapped["User"] = relationship(foreign_keys=[inquirer_id])
    property_owner: Mapped["User"] = relationship(foreign_keys=[property_owner_id])

    @property
    def preferred(self) -> PreferredTime | None:
        if self.preferred_date is None and self.preferred_time is None:
            return None
        return PreferredTime(date=self.preferred_date, time=self.preferred_time)

    @property
    def response(self) -> InquiryReply | None:
        if self.responded_at is None:
            return None
        return InquiryReply(
            message=self.response_message or "",
            responded_at=self.responded_at,
            responded_by=self.responded_by_id,
        )

    @property
    def meeting_scheduled(self) -> Meeting | None:
        if self.meeting_date is None:
            return None
        return Meeting(
            date=self.meeting_date,
            time=self.meeting_time or "",
            location=self.meeting_location or "",
            type=self.meeting_type or MeetingType.PHYSICAL.value,
        )

    def get_is_open(self) -> bool:
        """Check if the inquiry still awaits an outcome."""
        return self.status in {s.value for s in OPEN_INQUIRY_STATUSES}

    def mark_contacted(self, responder_id: int, message: str) -> None:
        """Record the owner's response and move to contacted."""
        self.status = InquiryStatus.CONTACTED.value
        self.response_message = message
        self.responded_at = datetime.now(UTC)
        self.responded_by_id = responder_id

    def schedule_meeting(self, meeting: Meeting) -> None:
        """Record meeting details and move to scheduled."""
        self.status = InquiryStatus.SCHEDULED.value
        self.meeting_date = meeting.date
        self.meeting_time = meeting.time
        self.meeting_location = meeting.location
        self.meeting_type = meeting.type
