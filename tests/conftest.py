"""Shared fixtures: in-memory database, API client and record factories."""

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hearth import models  # noqa: F401
from hearth.api.dependencies import get_notifier
from hearth.core.database import Base, get_db, register_sql_functions
from hearth.main import app
from hearth.models.enums import PropertyStatus, UserRole
from hearth.models.property import Property
from hearth.models.user import User
from hearth.services.notifications import NotificationOutcome, Recipient

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
register_sql_functions(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotifier:
    """Notifier double that remembers every call."""

    def __init__(self, fail: bool = False, raise_error: bool = False):
        self.sent: list[tuple[Recipient, str, dict[str, Any]]] = []
        self.fail = fail
        self.raise_error = raise_error

    def notify(self, recipient: Recipient, template_id: str, context: dict[str, Any]) -> NotificationOutcome:
        self.sent.append((recipient, template_id, context))
        if self.raise_error:
            raise RuntimeError("smtp exploded")
        if self.fail:
            return NotificationOutcome(False, recipient.email, template_id, "connection refused")
        return NotificationOutcome(True, recipient.email, template_id)

    def templates_sent(self) -> list[str]:
        return [template_id for _, template_id, _ in self.sent]


@pytest.fixture
def db() -> Iterator[Session]:
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(db: Session, notifier: RecordingNotifier) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db: Session):
    counter = {"n": 0}

    def _make_user(role: UserRole = UserRole.BUYER, **overrides: Any) -> User:
        counter["n"] += 1
        fields = {
            "first_name": "User",
            "last_name": f"Number{counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "phone": "9876543210",
            "role": role.value,
        }
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_property(db: Session):
    counter = {"n": 0}
    base_time = datetime(2026, 1, 1, tzinfo=UTC)

    def _make_property(owner: User, amenities: list[str] | None = None, **overrides: Any) -> Property:
        counter["n"] += 1
        fields = {
            "title": f"Listing number {counter['n']}",
            "description": "A well kept home close to schools and the market.",
            "property_type": "apartment",
            "listing_type": "sale",
            "price": 5_000_000,
            "area_value": 1000,
            "area_unit": "sqft",
            "bedrooms": 2,
            "bathrooms": 2,
            "address": "12 MG Road",
            "city": "Bangalore",
            "state": "Karnataka",
            "pincode": "560001",
            "status": PropertyStatus.ACTIVE.value,
            "owner_id": owner.id,
            "created_at": base_time + timedelta(minutes=counter["n"]),
        }
        fields.update(overrides)
        db_property = Property(**fields)
        db_property.set_amenities(amenities or [])
        db.add(db_property)
        db.commit()
        db.refresh(db_property)
        return db_property

    return _make_property


@pytest.fixture
def auth():
    """Build headers identifying a user to the API."""

    def _auth(user: User) -> dict[str, str]:
        return {"X-User-Id": str(user.id)}

    return _auth
