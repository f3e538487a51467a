"""Wishlist service: properties a user keeps an eye on."""

import logging
from collections.abc import Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, selectinload

from hearth.core.config import settings
from hearth.core.errors import ConflictError, NotFoundError
from hearth.models.property import Property
from hearth.models.user import User
from hearth.models.wishlist import WishlistItem
from hearth.services.pagination import Pagination, build_pagination, parse_page_request

logger = logging.getLogger(__name__)

ALREADY_SAVED = "Property already in wishlist"


def _hydrated(db: Session) -> Query:
    return db.query(WishlistItem).options(selectinload(WishlistItem.parent_property))


def add_to_wishlist(db: Session, user: User, property_id: int, notes: str | None = None) -> WishlistItem:
    """
    Save a property for ``user``.

    Raises:
        NotFoundError: If the property does not exist
        ConflictError: If the property is already saved

    """
    if not db.query(Property.id).filter(Property.id == property_id).first():
        raise NotFoundError("Property not found")

    existing = (
        db.query(WishlistItem.id)
        .filter(WishlistItem.user_id == user.id, WishlistItem.property_id == property_id)
        .first()
    )
    if existing:
        raise ConflictError(ALREADY_SAVED)

    item = WishlistItem(user_id=user.id, property_id=property_id, notes=(notes or "").strip() or None)
    db.add(item)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(ALREADY_SAVED) from e

    logger.info("Wishlist item added", extra={"user_id": user.id, "property_id": property_id})
    return _hydrated(db).filter(WishlistItem.id == item.id).one()


def list_wishlist(db: Session, user: User, params: Mapping[str, str]) -> tuple[list[WishlistItem], Pagination]:
    """The caller's saved properties, most recently saved first."""
    page_request = parse_page_request(params, default_limit=settings.USER_PAGE_LIMIT)
    query = _hydrated(db).filter(WishlistItem.user_id == user.id)
    total = query.count()
    items = (
        query.order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
        .offset(page_request.offset)
        .limit(page_request.limit)
        .all()
    )
    return items, build_pagination(page_request, total)


def remove_from_wishlist(db: Session, user: User, property_id: int) -> None:
    item = (
        db.query(WishlistItem)
        .filter(WishlistItem.user_id == user.id, WishlistItem.property_id == property_id)
        .first()
    )
    if item is None:
        raise NotFoundError("Property not found in wishlist")

    db.delete(item)
    db.commit()
    logger.info("Wishlist item removed", extra={"user_id": user.id, "property_id": property_id})
