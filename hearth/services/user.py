"""User directory: profiles only, credentials live upstream."""

import logging

from sqlalchemy.orm import Session

from hearth.core.errors import AuthenticationError, ConflictError
from hearth.models.user import User
from hearth.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def create_user(db: Session, user_data: UserCreate) -> User:
    """
    Register a user profile.

    Args:
        db: Database session
        user_data: Profile fields

    Returns:
        Created user

    Raises:
        ConflictError: If the e-mail address is already registered

    """
    email = user_data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise ConflictError("User already exists with this email")

    user = User(
        first_name=user_data.first_name.strip(),
        last_name=user_data.last_name.strip(),
        email=email,
        phone=user_data.phone,
        role=user_data.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id, "role": user.role})
    return user


def get_user(db: Session, user_id: int) -> User | None:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def resolve_caller(db: Session, raw_user_id: str | None) -> User:
    """Turn the forwarded caller id into an active user, or fail with 401."""
    if not raw_user_id:
        raise AuthenticationError("Access denied. No user identity provided")
    try:
        user_id = int(raw_user_id)
    except ValueError:
        raise AuthenticationError("Invalid user identity") from None

    user = get_user(db, user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("Invalid user identity")
    return user
