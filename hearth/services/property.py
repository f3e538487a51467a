"""Property service: listing search, detail, ownership and moderation."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from hearth.core.config import settings
from hearth.core.errors import AuthorizationError, DependencyError, NotFoundError, ValidationError
from hearth.models.enums import PropertyStatus, UserRole
from hearth.models.property import Property
from hearth.models.user import User
from hearth.schemas.property import PropertyCreate, PropertyUpdate
from hearth.services.filters import (
    build_listing_query,
    build_moderation_query,
    build_owner_query,
    build_search_query,
)
from hearth.services.pagination import PageRequest, Pagination, build_pagination, parse_page_request
from hearth.services.predicates import PropertyQuery
from hearth.services.query import apply_query, order_clauses

logger = logging.getLogger(__name__)

LISTING_ROLES = {UserRole.SELLER.value, UserRole.AGENT.value, UserRole.ADMIN.value}
SIMILAR_PRICE_BAND = 0.3
NON_NULLABLE_FIELDS = (
    "title",
    "description",
    "property_type",
    "listing_type",
    "price",
    "area",
    "location",
    "amenities",
    "images",
    "parking",
)


DISPLAY_LOADS = (
    selectinload(Property.owner),
    selectinload(Property.agent),
    selectinload(Property.amenity_links),
)


def _hydrated(db: Session) -> Query:
    return db.query(Property).options(*DISPLAY_LOADS)


def run_query(
    db: Session,
    query: PropertyQuery,
    page_request: PageRequest,
) -> tuple[list[Property], Pagination]:
    """
    Count and fetch one window of listings matching ``query``.

    Both statements come from the same filtered query object so the
    total and the window always agree on the predicate.
    """
    base = apply_query(db.query(Property), query)
    try:
        total = base.count()
        items = (
            base.options(*DISPLAY_LOADS)
            .order_by(*order_clauses(query))
            .offset(page_request.offset)
            .limit(page_request.limit)
            .all()
        )
    except SQLAlchemyError as e:
        logger.exception("Property query failed")
        raise DependencyError("Server error while fetching properties") from e

    return items, build_pagination(page_request, total)


def list_properties(
    db: Session, params: Mapping[str, str], privileged: bool = False
) -> tuple[list[Property], Pagination]:
    """Filtered, sorted, paginated listings. Public callers only see active ones."""
    query = build_listing_query(params, privileged=privileged)
    return run_query(db, query, parse_page_request(params))


def search_properties(
    db: Session, params: Mapping[str, str], privileged: bool = False
) -> tuple[list[Property], Pagination]:
    """Listings plus free-text relevance and geo-radius filtering."""
    query = build_search_query(params, privileged=privileged)
    return run_query(db, query, parse_page_request(params))


def list_owned_properties(
    db: Session, owner: User, params: Mapping[str, str]
) -> tuple[list[Property], Pagination]:
    """The caller's own listings in every status, including those awaiting moderation."""
    query = build_owner_query(params, owner_id=owner.id)
    return run_query(db, query, parse_page_request(params, default_limit=settings.USER_PAGE_LIMIT))


def get_property(db: Session, property_id: int) -> Property:
    """Get a property by ID without side effects."""
    db_property = _hydrated(db).filter(Property.id == property_id).first()
    if not db_property:
        raise NotFoundError("Property not found")
    return db_property


def view_property(db: Session, property_id: int) -> Property:
    """
    Get a property for display and count the view.

    The increment is a single ``UPDATE ... SET views = views + 1`` so
    concurrent readers never lose a view. A failed increment is logged
    and does not fail the read.
    """
    db_property = get_property(db, property_id)

    try:
        db.query(Property).filter(Property.id == property_id).update(
            {Property.views: Property.views + 1},
            synchronize_session=False,
        )
        db.commit()
    except SQLAlchemyError:
        logger.warning("Failed to increment views", exc_info=True, extra={"property_id": property_id})
        db.rollback()

    return get_property(db, property_id)


def _check_agent(db: Session, agent_id: int | None) -> None:
    if agent_id is None:
        return
    agent = db.query(User).filter(User.id == agent_id).first()
    if agent is None or agent.role != UserRole.AGENT:
        raise ValidationError("agentId", "Agent must be an existing user with the agent role")


def _apply_fields(db_property: Property, data: dict[str, Any]) -> None:
    """Copy request fields onto the model, flattening area and location."""
    area = data.pop("area", None)
    if area is not None:
        db_property.area_value = area["value"]
        db_property.area_unit = area["unit"]

    location = data.pop("location", None)
    if location is not None:
        coordinates = location.get("coordinates") or {}
        db_property.address = location["address"]
        db_property.city = location["city"]
        db_property.state = location["state"]
        db_property.pincode = location["pincode"]
        db_property.latitude = coordinates.get("latitude")
        db_property.longitude = coordinates.get("longitude")

    amenities = data.pop("amenities", None)
    if amenities is not None:
        db_property.set_amenities(amenities)

    for field, value in data.items():
        setattr(db_property, field, value)


def _ensure_can_manage(db_property: Property, user: User, action: str) -> None:
    if db_property.owner_id != user.id and not user.get_is_admin():
        raise AuthorizationError(f"Not authorized to {action} this property")


def create_property(db: Session, property_data: PropertyCreate, owner: User) -> Property:
    """Create a listing owned by ``owner``, pending moderation."""
    if owner.role not in LISTING_ROLES:
        raise AuthorizationError(f"User role {owner.role} is not authorized to access this route")
    _check_agent(db, property_data.agent_id)

    db_property = Property(owner_id=owner.id, status=PropertyStatus.PENDING_APPROVAL.value)
    _apply_fields(db_property, property_data.model_dump(mode="json"))
    db.add(db_property)
    db.commit()

    logger.info("Property created", extra={"property_id": db_property.id, "owner_id": owner.id})
    return get_property(db, db_property.id)


def update_property(
    db: Session,
    property_id: int,
    property_data: PropertyUpdate,
    user: User,
) -> Property:
    """Update a listing. pricePerSqft is recomputed on flush."""
    update_data = property_data.model_dump(mode="json", exclude_unset=True)
    for name in NON_NULLABLE_FIELDS:
        if name in update_data and update_data[name] is None:
            raise ValidationError(to_camel(name), f"{to_camel(name)} cannot be null")

    db_property = get_property(db, property_id)
    _ensure_can_manage(db_property, user, "update")
    if "agent_id" in update_data:
        _check_agent(db, update_data["agent_id"])

    _apply_fields(db_property, update_data)
    db.commit()
    return get_property(db, property_id)


def delete_property(db: Session, property_id: int, user: User) -> Property:
    """Withdraw a listing. Rows are kept so inquiries keep their property."""
    db_property = get_property(db, property_id)
    _ensure_can_manage(db_property, user, "delete")

    db_property.status = PropertyStatus.INACTIVE.value
    db.commit()
    logger.info("Property withdrawn", extra={"property_id": property_id, "user_id": user.id})
    return db_property


def get_similar_properties(db: Session, property_id: int, limit: int = 5) -> list[Property]:
    """Active listings of the same type and city priced within 30 % of the reference."""
    reference = get_property(db, property_id)
    low = reference.price * (1 - SIMILAR_PRICE_BAND)
    high = reference.price * (1 + SIMILAR_PRICE_BAND)
    return (
        _hydrated(db)
        .filter(
            Property.id != reference.id,
            Property.status == PropertyStatus.ACTIVE.value,
            Property.property_type == reference.property_type,
            Property.listing_type == reference.listing_type,
            Property.city == reference.city,
            Property.price >= low,
            Property.price <= high,
        )
        .order_by(Property.featured.desc(), Property.created_at.desc(), Property.id.desc())
        .limit(limit)
        .all()
    )


def get_trending_properties(db: Session, limit: int = 10) -> list[Property]:
    """Most viewed active listings, newest first among equals."""
    return (
        _hydrated(db)
        .filter(Property.status == PropertyStatus.ACTIVE.value)
        .order_by(Property.views.desc(), Property.created_at.desc(), Property.id.desc())
        .limit(limit)
        .all()
    )


def list_for_moderation(db: Session, params: Mapping[str, str]) -> tuple[list[Property], Pagination]:
    """Admin queue over every status, newest first."""
    query = build_moderation_query(params)
    return run_query(db, query, parse_page_request(params, default_limit=settings.MODERATION_PAGE_LIMIT))


def moderate_property(db: Session, property_id: int, action: str, moderator: User) -> Property:
    """Approve (active and verified) or reject (inactive and unverified) a listing."""
    db_property = get_property(db, property_id)

    if action == "approve":
        db_property.status = PropertyStatus.ACTIVE.value
        db_property.verified = True
    elif action == "reject":
        db_property.status = PropertyStatus.INACTIVE.value
        db_property.verified = False
    else:
        raise ValidationError("action", "Invalid action. Use approve or reject")

    db.commit()
    logger.info(
        "Property moderated",
        extra={"property_id": property_id, "action": action, "moderator_id": moderator.id},
    )
    return get_property(db, property_id)
