"""Inquiry service: the buyer-to-owner conversation state machine.

    pending -> contacted -> scheduled -> completed
    pending | contacted | scheduled -> cancelled

Guarded operations check input, then existence, then the actor, then
the current state. ``update_status`` is a loose escape hatch that only
checks the actor; moves outside the guarded table are audit-logged.
Notifications are best-effort and never undo a persisted transition.
"""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, selectinload

from hearth.core.config import settings
from hearth.core.errors import (
    AuthorizationError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from hearth.models.enums import OPEN_INQUIRY_STATUSES, InquiryStatus, InquiryType, MeetingType
from hearth.models.inquiry import Inquiry, Meeting
from hearth.models.property import Property
from hearth.models.user import User
from hearth.schemas.inquiry import InquiryCreate
from hearth.services.filters import parse_enum
from hearth.services.notifications import (
    INQUIRY_RESPONSE,
    MEETING_SCHEDULED,
    PROPERTY_INQUIRY,
    Notifier,
    Recipient,
)
from hearth.services.pagination import Pagination, build_pagination, parse_page_request

logger = logging.getLogger(__name__)

OPEN = frozenset(s.value for s in OPEN_INQUIRY_STATUSES)
PENDING = InquiryStatus.PENDING.value
CONTACTED = InquiryStatus.CONTACTED.value
SCHEDULED = InquiryStatus.SCHEDULED.value
COMPLETED = InquiryStatus.COMPLETED.value
CANCELLED = InquiryStatus.CANCELLED.value

# (from, to) moves the guarded operations can make
GUARDED_TRANSITIONS = frozenset(
    {
        (PENDING, CONTACTED),
        (CONTACTED, CONTACTED),
        (PENDING, SCHEDULED),
        (CONTACTED, SCHEDULED),
        (SCHEDULED, SCHEDULED),
        (SCHEDULED, COMPLETED),
        (PENDING, CANCELLED),
        (CONTACTED, CANCELLED),
        (SCHEDULED, CANCELLED),
    }
)

DUPLICATE_OPEN_INQUIRY = "You already have an active inquiry for this property"


def _hydrated(db: Session) -> Query:
    return db.query(Inquiry).options(
        selectinload(Inquiry.parent_property),
        selectinload(Inquiry.inquirer),
        selectinload(Inquiry.property_owner),
    )


def _load(db: Session, inquiry_id: int) -> Inquiry:
    inquiry = _hydrated(db).filter(Inquiry.id == inquiry_id).first()
    if not inquiry:
        raise NotFoundError("Inquiry not found")
    return inquiry


def _has_open_inquiry(db: Session, inquirer_id: int, property_id: int, exclude_id: int | None = None) -> bool:
    query = db.query(Inquiry.id).filter(
        Inquiry.inquirer_id == inquirer_id,
        Inquiry.property_id == property_id,
        Inquiry.status.in_(OPEN),
    )
    if exclude_id is not None:
        query = query.filter(Inquiry.id != exclude_id)
    return query.first() is not None


def _recipient(user: User) -> Recipient:
    return Recipient(email=user.email, name=user.name)


def _notify(notifier: Notifier, user: User, template_id: str, context: dict[str, Any]) -> None:
    """Send and log the outcome. Failures are recorded, never raised."""
    try:
        outcome = notifier.notify(_recipient(user), template_id, context)
    except Exception:
        logger.exception("Notifier raised", extra={"template_id": template_id, "user_id": user.id})
        return

    if outcome.delivered:
        logger.info("Notification delivered", extra={"template_id": template_id, "user_id": user.id})
    else:
        logger.warning(
            "Notification failed",
            extra={"template_id": template_id, "user_id": user.id, "error": outcome.error},
        )


def _base_context(inquiry: Inquiry, recipient: User) -> dict[str, Any]:
    return {
        "recipient_name": recipient.first_name,
        "property": {"id": inquiry.parent_property.id, "title": inquiry.parent_property.title},
    }


def create_inquiry(
    db: Session,
    inquiry_data: InquiryCreate,
    inquirer: User,
    notifier: Notifier,
) -> Inquiry:
    """
    Open an inquiry about a property and notify its owner.

    Raises:
        NotFoundError: If the property does not exist
        ConflictError: If the caller owns the property or already has an open inquiry on it

    """
    db_property = db.query(Property).filter(Property.id == inquiry_data.property_id).first()
    if not db_property:
        raise NotFoundError("Property not found")
    if db_property.owner_id == inquirer.id:
        raise ConflictError("Cannot create inquiry for your own property")
    if _has_open_inquiry(db, inquirer.id, db_property.id):
        raise ConflictError(DUPLICATE_OPEN_INQUIRY)

    preferred = inquiry_data.preferred_time
    inquiry = Inquiry(
        property_id=db_property.id,
        inquirer_id=inquirer.id,
        property_owner_id=db_property.owner_id,
        type=inquiry_data.type.value,
        message=inquiry_data.message,
        contact_preference=inquiry_data.contact_preference.value,
        preferred_date=preferred.date if preferred else None,
        preferred_time=preferred.time if preferred else None,
        status=PENDING,
    )
    db.add(inquiry)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent create for the same pair
        db.rollback()
        raise ConflictError(DUPLICATE_OPEN_INQUIRY) from e

    inquiry = _load(db, inquiry.id)
    logger.info(
        "Inquiry created",
        extra={"inquiry_id": inquiry.id, "property_id": db_property.id, "inquirer_id": inquirer.id},
    )

    context = _base_context(inquiry, inquiry.property_owner)
    context["inquirer"] = {"name": inquirer.name, "email": inquirer.email, "phone": inquirer.phone}
    context["inquiry"] = {
        "type": inquiry.type,
        "message": inquiry.message,
        "contact_preference": inquiry.contact_preference,
    }
    _notify(notifier, inquiry.property_owner, PROPERTY_INQUIRY, context)
    return inquiry


def get_inquiry(db: Session, inquiry_id: int, user: User) -> Inquiry:
    """Get an inquiry visible to one of its two parties."""
    inquiry = _load(db, inquiry_id)
    if user.id not in (inquiry.inquirer_id, inquiry.property_owner_id):
        raise AuthorizationError("Not authorized to view this inquiry")
    return inquiry


def respond(
    db: Session,
    inquiry_id: int,
    message: str | None,
    user: User,
    notifier: Notifier,
) -> Inquiry:
    """Owner replies to a pending or contacted inquiry."""
    message = (message or "").strip()
    if not message:
        raise ValidationError("message", "Response message is required")

    inquiry = _load(db, inquiry_id)
    if inquiry.property_owner_id != user.id:
        raise AuthorizationError("Not authorized to respond to this inquiry")
    if inquiry.status not in (PENDING, CONTACTED):
        raise InvalidTransitionError(f"Cannot respond to an inquiry that is {inquiry.status}")

    inquiry.mark_contacted(user.id, message)
    db.commit()
    inquiry = _load(db, inquiry_id)
    logger.info("Inquiry answered", extra={"inquiry_id": inquiry.id, "responder_id": user.id})

    context = _base_context(inquiry, inquiry.inquirer)
    context["responder_name"] = user.name
    context["response"] = {"message": message}
    _notify(notifier, inquiry.inquirer, INQUIRY_RESPONSE, context)
    return inquiry


def schedule(
    db: Session,
    inquiry_id: int,
    meeting_date: date | None,
    meeting_time: str | None,
    meeting_type: MeetingType | None,
    location: str | None,
    user: User,
    notifier: Notifier,
) -> Inquiry:
    """Owner fixes a meeting on an open inquiry."""
    meeting_time = (meeting_time or "").strip()
    if meeting_date is None or not meeting_time or meeting_type is None:
        raise ValidationError("meetingScheduled", "Date, time, and meeting type are required")

    inquiry = _load(db, inquiry_id)
    if inquiry.property_owner_id != user.id:
        raise AuthorizationError("Not authorized to schedule meeting for this inquiry")
    if inquiry.status not in OPEN:
        raise InvalidTransitionError(f"Cannot schedule a meeting for an inquiry that is {inquiry.status}")

    meeting = Meeting(
        date=meeting_date,
        time=meeting_time,
        location=(location or "").strip(),
        type=MeetingType(meeting_type).value,
    )
    inquiry.schedule_meeting(meeting)
    db.commit()
    inquiry = _load(db, inquiry_id)
    logger.info("Meeting scheduled", extra={"inquiry_id": inquiry.id, "meeting_date": str(meeting_date)})

    context = _base_context(inquiry, inquiry.inquirer)
    context["meeting"] = {
        "date": meeting.date.isoformat(),
        "time": meeting.time,
        "location": meeting.location,
        "type": meeting.type,
    }
    _notify(notifier, inquiry.inquirer, MEETING_SCHEDULED, context)
    return inquiry


def update_status(db: Session, inquiry_id: int, status: str | None, user: User) -> Inquiry:
    """
    Set any status on behalf of either party.

    Only the open-inquiry uniqueness is enforced; moves that skip the
    guarded operations are written to the audit log.
    """
    try:
        target = InquiryStatus(status).value
    except ValueError:
        raise ValidationError("status", "Invalid status") from None

    inquiry = _load(db, inquiry_id)
    if user.id not in (inquiry.inquirer_id, inquiry.property_owner_id):
        raise AuthorizationError("Not authorized to update this inquiry")

    current = inquiry.status
    if target in OPEN and not inquiry.get_is_open():
        if _has_open_inquiry(db, inquiry.inquirer_id, inquiry.property_id, exclude_id=inquiry.id):
            raise ConflictError(DUPLICATE_OPEN_INQUIRY)

    inquiry.status = target
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(DUPLICATE_OPEN_INQUIRY) from e

    audit = {"inquiry_id": inquiry_id, "user_id": user.id, "from_status": current, "to_status": target}
    if current != target and (current, target) not in GUARDED_TRANSITIONS:
        logger.warning("Inquiry status changed outside guarded transitions", extra=audit)
    else:
        logger.info("Inquiry status updated", extra=audit)
    return _load(db, inquiry_id)


def leave_feedback(
    db: Session,
    inquiry_id: int,
    rating: int,
    feedback: str | None,
    user: User,
) -> Inquiry:
    """Inquirer rates a completed inquiry."""
    if not 1 <= rating <= 5:
        raise ValidationError("rating", "Rating must be between 1 and 5")

    inquiry = _load(db, inquiry_id)
    if inquiry.inquirer_id != user.id:
        raise AuthorizationError("Not authorized to leave feedback on this inquiry")
    if inquiry.status != COMPLETED:
        raise InvalidTransitionError("Feedback can only be given for completed inquiries")

    inquiry.rating = rating
    inquiry.feedback = (feedback or "").strip() or None
    db.commit()
    return _load(db, inquiry_id)


def _paginate(query: Query, params: Mapping[str, str]) -> tuple[list[Inquiry], Pagination]:
    page_request = parse_page_request(params, default_limit=settings.USER_PAGE_LIMIT)
    total = query.count()
    items = (
        query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
        .offset(page_request.offset)
        .limit(page_request.limit)
        .all()
    )
    return items, build_pagination(page_request, total)


def list_sent(db: Session, user: User, params: Mapping[str, str]) -> tuple[list[Inquiry], Pagination]:
    """Inquiries the caller has sent, newest first."""
    query = _hydrated(db).filter(Inquiry.inquirer_id == user.id)
    return _paginate(query, params)


def list_received(
    db: Session, user: User, params: Mapping[str, str]
) -> tuple[list[Inquiry], Pagination]:
    """Inquiries about the caller's properties, optionally by status and type."""
    query = _hydrated(db).filter(Inquiry.property_owner_id == user.id)

    status = parse_enum(params, "status", InquiryStatus)
    if status is not None:
        query = query.filter(Inquiry.status == status.value)
    inquiry_type = parse_enum(params, "type", InquiryType)
    if inquiry_type is not None:
        query = query.filter(Inquiry.type == inquiry_type.value)

    return _paginate(query, params)
