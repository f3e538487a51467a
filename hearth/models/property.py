"""Property database model."""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Float, ForeignKey, Index, String, Text, UniqueConstraint, event
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hearth.core.database import Base
from hearth.models.enums import AreaUnit, PropertyStatus

if TYPE_CHECKING:
    from hearth.models.user import User

SQFT_PER_UNIT = {
    AreaUnit.SQFT: Decimal("1"),
    AreaUnit.SQM: Decimal("10.764"),
    AreaUnit.ACRES: Decimal("43560"),
}


def area_in_sqft(value: float, unit: str) -> Decimal:
    """Convert an area to square feet."""
    return Decimal(str(value)) * SQFT_PER_UNIT[AreaUnit(unit)]


def compute_price_per_sqft(price: float, area_value: float, area_unit: str) -> int | None:
    """
    Compute the rounded price per square foot.

    Formula: round_half_up(price / area_in_sqft)

    Returns None if the area is missing or not positive.
    """
    if price is None or not area_value or area_value <= 0:
        return None
    ratio = Decimal(str(price)) / area_in_sqft(area_value, area_unit)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Area:
    value: float
    unit: str


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Location:
    address: str
    city: str
    state: str
    pincode: str
    latitude: float | None = None
    longitude: float | None = None

    @property
    def coordinates(self) -> Coordinates | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class PropertyAmenity(Base):
    """One advertised amenity of a property."""

    __tablename__ = "property_amenities"
    __table_args__ = (UniqueConstraint("property_id", "name", name="uq_property_amenity"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        index=True,
    )
    name: Mapped[str] = mapped_column(String(50), index=True)

    parent_property: Mapped["Property"] = relationship(back_populates="amenity_links")


class Property(Base):
    """A listing owned by one user and optionally handled by an agent."""

    __tablename__ = "properties"
    __table_args__ = (
        Index("ix_properties_status_type", "status", "property_type"),
        Index("ix_properties_city_state", "city", "state"),
        Index("ix_properties_featured_created", "featured", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(Text)
    property_type: Mapped[str] = mapped_column(String(20))
    listing_type: Mapped[str] = mapped_column(String(10), index=True)
    price: Mapped[float] = mapped_column(Float, index=True)

    # Area
    area_value: Mapped[float] = mapped_column(Float)
    area_unit: Mapped[str] = mapped_column(String(10), default=AreaUnit.SQFT.value)

    bedrooms: Mapped[int | None] = mapped_column(nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(nullable=True)

    # Location
    address: Mapped[str] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(100))
    state: Mapped[str] = mapped_column(String(100))
    pincode: Mapped[str] = mapped_column(String(6))
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Ordered [{"id": ..., "url": ...}]
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    status: Mapped[str] = mapped_column(String(20), default=PropertyStatus.PENDING_APPROVAL.value)
    featured: Mapped[bool] = mapped_column(default=False)
    verified: Mapped[bool] = mapped_column(default=False)
    views: Mapped[int] = mapped_column(default=0)
    price_per_sqft: Mapped[int | None] = mapped_column(nullable=True)  # Derived, see listeners
    furnished: Mapped[str | None] = mapped_column(String(20), nullable=True)
    parking: Mapped[int] = mapped_column(default=0)

    # Foreign keys
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    agent_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="properties", foreign_keys=[owner_id])
    agent: Mapped["User | None"] = relationship(foreign_keys=[agent_id])
    amenity_links: Mapped[list[PropertyAmenity]] = relationship(
        back_populates="parent_property",
        cascade="all, delete-orphan",
    )

    amenities: AssociationProxy[list[str]] = association_proxy(
        "amenity_links",
        "name",
        creator=lambda name: PropertyAmenity(name=name),
    )

    @property
    def area(self) -> Area:
        return Area(value=self.area_value, unit=self.area_unit)

    @property
    def location(self) -> Location:
        return Location(
            address=self.address,
            city=self.city,
            state=self.state,
            pincode=self.pincode,
            latitude=self.latitude,
            longitude=self.longitude,
        )

    def set_amenities(self, names: list[str]) -> None:
        """Replace the amenity set, keeping rows for names that stay."""
        wanted = list(dict.fromkeys(names))
        kept = [link for link in self.amenity_links if link.name in wanted]
        present = {link.name for link in kept}
        self.amenity_links = kept + [PropertyAmenity(name=name) for name in wanted if name not in present]

    def recompute_price_per_sqft(self) -> None:
        """Derive price_per_sqft from the current price and area."""
        self.price_per_sqft = compute_price_per_sqft(self.price, self.area_value, self.area_unit)


@event.listens_for(Property, "before_insert")
@event.listens_for(Property, "before_update")
def _sync_price_per_sqft(mapper, connection, target: Property) -> None:  # noqa: ARG001
    target.recompute_price_per_sqft()
