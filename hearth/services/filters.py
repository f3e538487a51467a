"""Filter builder: untrusted query parameters to a ``PropertyQuery``.

Only allow-listed parameters are read, each through a typed parser.
Unknown parameters are ignored and empty strings count as absent.
"""

import math
from collections.abc import Mapping
from enum import Enum
from typing import TypeVar

from hearth.core.errors import ValidationError
from hearth.models.enums import Amenity, ListingType, PropertyStatus, PropertyType
from hearth.services.predicates import (
    DEFAULT_SORT,
    AnyOf,
    Contains,
    Equals,
    GeoWithin,
    PropertyQuery,
    Range,
    SortDirection,
    SortKey,
    TextMatch,
)

# Public sort name -> Property attribute
SORTABLE_FIELDS = {
    "price": "price",
    "createdAt": "created_at",
    "views": "views",
    "featured": "featured",
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
    "pricePerSqft": "price_per_sqft",
    "title": "title",
}

TEXT_SEARCH_FIELDS = ("title", "description", "address", "city")

E = TypeVar("E", bound=Enum)

NEWEST_FIRST = (SortKey("created_at", SortDirection.DESC),)


def _raw(params: Mapping[str, str], name: str) -> str | None:
    value = params.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_enum(params: Mapping[str, str], name: str, enum_cls: type[E]) -> E | None:
    raw = _raw(params, name)
    if raw is None:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(name, f"Invalid {name}. Allowed values: {allowed}") from None


def parse_float(params: Mapping[str, str], name: str) -> float | None:
    raw = _raw(params, name)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(name, f"{name} must be a number") from None
    if not math.isfinite(value):
        raise ValidationError(name, f"{name} must be a number")
    return value


def parse_int(params: Mapping[str, str], name: str) -> int | None:
    raw = _raw(params, name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(name, f"{name} must be an integer") from None


def parse_bool(params: Mapping[str, str], name: str) -> bool | None:
    raw = _raw(params, name)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise ValidationError(name, f"{name} must be true or false")


def parse_amenities(params: Mapping[str, str]) -> tuple[str, ...]:
    """Collect amenities from a comma list or repeated parameters."""
    if hasattr(params, "getlist"):
        chunks = params.getlist("amenities")
    else:
        chunks = [params.get("amenities") or ""]

    names: list[str] = []
    for chunk in chunks:
        for item in chunk.split(","):
            item = item.strip()
            if not item:
                continue
            try:
                amenity = Amenity(item).value
            except ValueError:
                raise ValidationError("amenities", f"Invalid amenity: {item}") from None
            if amenity not in names:
                names.append(amenity)
    return tuple(names)


def parse_sort(raw: str | None) -> tuple[SortKey, ...] | None:
    """Parse ``sort=-price,createdAt``. Returns None when no sort was given."""
    if raw is None or not raw.strip():
        return None

    keys: list[SortKey] = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        direction = SortDirection.ASC
        if token.startswith("-"):
            direction = SortDirection.DESC
            token = token[1:]
        elif token.startswith("+"):
            token = token[1:]
        attribute = SORTABLE_FIELDS.get(token)
        if attribute is None:
            allowed = ", ".join(SORTABLE_FIELDS)
            raise ValidationError("sort", f"Cannot sort by {token}. Allowed fields: {allowed}")
        keys.append(SortKey(attribute, direction))
    return tuple(keys) or None


def _common_predicates(params: Mapping[str, str]) -> list:
    predicates: list = []

    property_type = parse_enum(params, "propertyType", PropertyType)
    if property_type is not None:
        predicates.append(Equals("property_type", property_type.value))

    listing_type = parse_enum(params, "listingType", ListingType)
    if listing_type is not None:
        predicates.append(Equals("listing_type", listing_type.value))

    min_price = parse_float(params, "minPrice")
    max_price = parse_float(params, "maxPrice")
    if min_price is not None or max_price is not None:
        predicates.append(Range("price", low=min_price, high=max_price))

    for name in ("bedrooms", "bathrooms"):
        floor = parse_int(params, name)
        if floor is not None:
            predicates.append(Range(name, low=floor))

    for name in ("city", "state"):
        value = _raw(params, name)
        if value is not None:
            predicates.append(Contains(name, value))

    amenities = parse_amenities(params)
    if amenities:
        predicates.append(AnyOf("amenities", amenities))

    return predicates


def _status_predicate(params: Mapping[str, str], privileged: bool) -> Equals | None:
    if not privileged:
        return Equals("status", PropertyStatus.ACTIVE.value)
    status = parse_enum(params, "status", PropertyStatus)
    if status is None:
        return None
    return Equals("status", status.value)


def _geo_predicate(params: Mapping[str, str]) -> GeoWithin | None:
    latitude = parse_float(params, "latitude")
    longitude = parse_float(params, "longitude")
    radius = parse_float(params, "radius")
    if latitude is None or longitude is None or radius is None:
        return None
    if not -90 <= latitude <= 90:
        raise ValidationError("latitude", "latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise ValidationError("longitude", "longitude must be between -180 and 180")
    if radius <= 0:
        raise ValidationError("radius", "radius must be greater than 0")
    return GeoWithin(latitude=latitude, longitude=longitude, radius_km=radius)


def build_listing_query(params: Mapping[str, str], *, privileged: bool = False) -> PropertyQuery:
    """Build the query behind ``GET /properties``. Text and geo are ignored."""
    predicates = _common_predicates(params)
    status = _status_predicate(params, privileged)
    if status is not None:
        predicates.append(status)

    sort = parse_sort(params.get("sort"))
    return PropertyQuery(predicates=predicates, sort=sort or DEFAULT_SORT)


def build_search_query(params: Mapping[str, str], *, privileged: bool = False) -> PropertyQuery:
    """Build the query behind ``GET /properties/search``."""
    query = build_listing_query(params, privileged=privileged)

    q = _raw(params, "q")
    if q is not None:
        query.predicates.append(TextMatch(terms=tuple(q.split()), fields=TEXT_SEARCH_FIELDS))
        # Explicit sort wins over relevance
        query.rank_by_relevance = parse_sort(params.get("sort")) is None

    geo = _geo_predicate(params)
    if geo is not None:
        query.predicates.append(geo)

    return query


def build_moderation_query(params: Mapping[str, str]) -> PropertyQuery:
    """Build the admin moderation queue query: status, type, verified; newest first."""
    predicates = []

    status = parse_enum(params, "status", PropertyStatus)
    if status is not None:
        predicates.append(Equals("status", status.value))

    property_type = parse_enum(params, "propertyType", PropertyType)
    if property_type is not None:
        predicates.append(Equals("property_type", property_type.value))

    verified = parse_bool(params, "verified")
    if verified is not None:
        predicates.append(Equals("verified", verified))

    return PropertyQuery(predicates=predicates, sort=NEWEST_FIRST)


def build_owner_query(params: Mapping[str, str], owner_id: int) -> PropertyQuery:
    """Build the query for an owner's own listings in every status, newest first."""
    predicates = [Equals("owner_id", owner_id)]

    status = parse_enum(params, "status", PropertyStatus)
    if status is not None:
        predicates.append(Equals("status", status.value))

    return PropertyQuery(predicates=predicates, sort=NEWEST_FIRST)
