"""Compile predicates and sort keys into SQLAlchemy clauses over ``Property``."""

from functools import singledispatch

from sqlalchemy import ColumnElement, and_, case, false, func, or_, true
from sqlalchemy.orm import InstrumentedAttribute, Query

from hearth.models.property import Property, PropertyAmenity
from hearth.services.predicates import (
    AnyOf,
    Contains,
    Equals,
    GeoWithin,
    Predicate,
    PropertyQuery,
    Range,
    SortDirection,
    SortKey,
    TextMatch,
)

# Predicate/sort field names that may reach SQL
COLUMNS: dict[str, InstrumentedAttribute] = {
    "title": Property.title,
    "description": Property.description,
    "property_type": Property.property_type,
    "listing_type": Property.listing_type,
    "price": Property.price,
    "bedrooms": Property.bedrooms,
    "bathrooms": Property.bathrooms,
    "address": Property.address,
    "city": Property.city,
    "state": Property.state,
    "status": Property.status,
    "featured": Property.featured,
    "verified": Property.verified,
    "views": Property.views,
    "price_per_sqft": Property.price_per_sqft,
    "created_at": Property.created_at,
    "owner_id": Property.owner_id,
}


def _column(name: str) -> InstrumentedAttribute:
    try:
        return COLUMNS[name]
    except KeyError:
        raise ValueError(f"Unknown property field: {name}") from None


@singledispatch
def compile_predicate(predicate: Predicate) -> ColumnElement[bool]:
    raise TypeError(f"Unsupported predicate: {predicate!r}")


@compile_predicate.register
def _(predicate: Equals) -> ColumnElement[bool]:
    return _column(predicate.field) == predicate.value


@compile_predicate.register
def _(predicate: Range) -> ColumnElement[bool]:
    if predicate.is_empty():
        return false()
    column = _column(predicate.field)
    clauses = []
    if predicate.low is not None:
        clauses.append(column >= predicate.low)
    if predicate.high is not None:
        clauses.append(column <= predicate.high)
    return and_(*clauses) if clauses else true()


@compile_predicate.register
def _(predicate: Contains) -> ColumnElement[bool]:
    return _column(predicate.field).icontains(predicate.value, autoescape=True)


@compile_predicate.register
def _(predicate: AnyOf) -> ColumnElement[bool]:
    if predicate.field != "amenities":
        raise ValueError(f"AnyOf is not supported on {predicate.field}")
    return Property.amenity_links.any(PropertyAmenity.name.in_(predicate.values))


@compile_predicate.register
def _(predicate: TextMatch) -> ColumnElement[bool]:
    return or_(*_text_hits(predicate))


@compile_predicate.register
def _(predicate: GeoWithin) -> ColumnElement[bool]:
    distance = func.haversine_km(
        predicate.latitude,
        predicate.longitude,
        Property.latitude,
        Property.longitude,
    )
    return and_(
        Property.latitude.is_not(None),
        Property.longitude.is_not(None),
        distance <= predicate.radius_km,
    )


def _text_hits(predicate: TextMatch) -> list[ColumnElement[bool]]:
    return [
        _column(field).icontains(term, autoescape=True)
        for term in predicate.terms
        for field in predicate.fields
    ]


def relevance(predicate: TextMatch) -> ColumnElement[int]:
    """Number of (term, field) pairs that hit."""
    hits = [case((hit, 1), else_=0) for hit in _text_hits(predicate)]
    score = hits[0]
    for hit in hits[1:]:
        score = score + hit
    return score


def compile_sort(keys: tuple[SortKey, ...]) -> list:
    clauses = []
    for key in keys:
        column = _column(key.field)
        clauses.append(column.desc() if key.direction is SortDirection.DESC else column.asc())
    return clauses


def apply_query(base: Query, query: PropertyQuery) -> Query:
    """Apply the predicates of ``query`` to ``base``."""
    return base.filter(*(compile_predicate(p) for p in query.predicates))


def order_clauses(query: PropertyQuery) -> list:
    """Ordering for ``query``, always ending on id so pages are stable."""
    clauses = []
    text_match = query.text_match()
    if query.rank_by_relevance and text_match is not None:
        clauses.append(relevance(text_match).desc())
    clauses.extend(compile_sort(query.sort))
    clauses.append(Property.id.desc())
    return clauses
