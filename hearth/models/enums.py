"""Enum definitions for listings, users and inquiries."""

from enum import Enum


class UserRole(str, Enum):
    """Marketplace role of a user."""

    BUYER = "buyer"
    SELLER = "seller"
    AGENT = "agent"
    ADMIN = "admin"


class PropertyType(str, Enum):
    """Kind of real estate being listed."""

    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    PLOT = "plot"
    COMMERCIAL = "commercial"
    OFFICE = "office"
    SHOP = "shop"


class ListingType(str, Enum):
    """Whether the property is offered for sale or rent."""

    SALE = "sale"
    RENT = "rent"


class PropertyStatus(str, Enum):
    """Listing lifecycle status."""

    ACTIVE = "active"
    SOLD = "sold"
    RENTED = "rented"
    INACTIVE = "inactive"
    PENDING_APPROVAL = "pending_approval"


class AreaUnit(str, Enum):
    """Unit the listed area is expressed in."""

    SQFT = "sqft"
    SQM = "sqm"
    ACRES = "acres"


class Furnishing(str, Enum):
    """Furnishing level."""

    FURNISHED = "furnished"
    SEMI_FURNISHED = "semi-furnished"
    UNFURNISHED = "unfurnished"


class Amenity(str, Enum):
    """Amenities a listing may advertise."""

    PARKING = "parking"
    GYM = "gym"
    SWIMMING_POOL = "swimming_pool"
    GARDEN = "garden"
    SECURITY = "security"
    POWER_BACKUP = "power_backup"
    ELEVATOR = "elevator"
    WATER_SUPPLY = "water_supply"
    INTERNET = "internet"
    AIR_CONDITIONING = "air_conditioning"
    BALCONY = "balcony"
    TERRACE = "terrace"
    STORE_ROOM = "store_room"
    SERVANT_ROOM = "servant_room"
    STUDY_ROOM = "study_room"
    POOJA_ROOM = "pooja_room"
    LIBRARY = "library"
    CLUB_HOUSE = "club_house"
    PLAYGROUND = "playground"
    MEDICAL_FACILITY = "medical_facility"


class InquiryType(str, Enum):
    """What the inquirer is asking for."""

    VISIT = "visit"
    CALL = "call"
    EMAIL = "email"
    GENERAL = "general"


class ContactPreference(str, Enum):
    """How the inquirer prefers to be contacted."""

    PHONE = "phone"
    EMAIL = "email"
    WHATSAPP = "whatsapp"


class InquiryStatus(str, Enum):
    """Inquiry lifecycle status."""

    PENDING = "pending"
    CONTACTED = "contacted"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MeetingType(str, Enum):
    """Whether a scheduled meeting happens on site or online."""

    PHYSICAL = "physical"
    VIRTUAL = "virtual"


OPEN_INQUIRY_STATUSES = frozenset(
    {InquiryStatus.PENDING, InquiryStatus.CONTACTED, InquiryStatus.SCHEDULED}
)