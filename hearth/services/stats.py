"""Marketplace counters for the admin dashboard."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from hearth.models.enums import PropertyStatus
from hearth.models.inquiry import Inquiry
from hearth.models.property import Property
from hearth.models.user import User

RECENT_WINDOW = timedelta(days=30)


@dataclass(frozen=True)
class DashboardStats:
    total_users: int
    total_properties: int
    active_properties: int
    pending_properties: int
    total_inquiries: int
    recent_users: int
    recent_properties: int
    users_by_role: dict[str, int]
    properties_by_type: dict[str, int]


def _count_by(db: Session, column) -> dict[str, int]:
    return {key: count for key, count in db.query(column, func.count()).group_by(column).all()}


def get_dashboard_stats(db: Session, now: datetime | None = None) -> DashboardStats:
    """Totals, the last 30 days of sign-ups and listings, and two breakdowns."""
    since = (now or datetime.now(UTC)) - RECENT_WINDOW

    def properties_with(status: PropertyStatus) -> int:
        return db.query(Property).filter(Property.status == status.value).count()

    return DashboardStats(
        total_users=db.query(User).count(),
        total_properties=db.query(Property).count(),
        active_properties=properties_with(PropertyStatus.ACTIVE),
        pending_properties=properties_with(PropertyStatus.PENDING_APPROVAL),
        total_inquiries=db.query(Inquiry).count(),
        recent_users=db.query(User).filter(User.created_at >= since).count(),
        recent_properties=db.query(Property).filter(Property.created_at >= since).count(),
        users_by_role=_count_by(db, User.role),
        properties_by_type=_count_by(db, Property.property_type),
    )
