"""Database models."""

from hearth.models.inquiry import Inquiry
from hearth.models.property import Property, PropertyAmenity
from hearth.models.user import User
from hearth.models.wishlist import WishlistItem

__all__ = ["Inquiry", "Property", "PropertyAmenity", "User", "WishlistItem"]
