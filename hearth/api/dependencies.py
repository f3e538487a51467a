"""Request-scoped dependencies shared by the API routes."""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from hearth.core.config import settings
from hearth.core.database import get_db
from hearth.core.errors import AuthenticationError, AuthorizationError
from hearth.models.user import User
from hearth.services import user as user_service
from hearth.services.notifications import Notifier

logger = logging.getLogger(__name__)


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the authenticated caller.

    The authentication front verifies credentials and forwards the user
    id in ``settings.AUTH_USER_HEADER``.
    """
    return user_service.resolve_caller(db, request.headers.get(settings.AUTH_USER_HEADER))


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> User | None:
    """
    Like get_current_user, but for public routes.

    A missing or unresolvable identity is treated as anonymous.
    """
    raw_user_id = request.headers.get(settings.AUTH_USER_HEADER)
    if not raw_user_id:
        return None
    try:
        return user_service.resolve_caller(db, raw_user_id)
    except AuthenticationError:
        logger.info("Ignoring unresolvable caller identity on a public route")
        return None


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.get_is_admin():
        raise AuthorizationError(f"User role {user.role} is not authorized to access this route")
    return user


def get_notifier(request: Request) -> Notifier:
    """The notifier built at startup."""
    return request.app.state.notifier
