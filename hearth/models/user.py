"""User database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hearth.core.database import Base
from hearth.models.enums import UserRole

if TYPE_CHECKING:
    from hearth.models.property import Property


class User(Base):
    """Marketplace user profile. Credentials live with the identity provider."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    first_name: Mapped[str] = mapped_column(String(50))
    last_name: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.BUYER.value)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    is_active: Mapped[bool] = mapped_column(default=True)

    # Relationships
    properties: Mapped[list["Property"]] = relationship(
        back_populates="owner",
        foreign_keys="Property.owner_id",
    )

    @property
    def name(self) -> str:
        """Full display name."""
        return f"{self.first_name} {self.last_name}"

    def get_is_admin(self) -> bool:
        """Check if this user moderates the marketplace."""
        return self.role == UserRole.ADMIN
