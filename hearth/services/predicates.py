"""Storage-agnostic filter predicates.

A predicate describes which records match without saying how the store
evaluates it. ``hearth.services.query`` compiles them to SQLAlchemy.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Equals:
    field: str
    value: object


@dataclass(frozen=True)
class Range:
    """Inclusive bounds; either side may be open.

    A low bound above the high bound matches nothing.
    """

    field: str
    low: float | None = None
    high: float | None = None

    def is_empty(self) -> bool:
        return self.low is not None and self.high is not None and self.low > self.high


@dataclass(frozen=True)
class AnyOf:
    """Matches when the record's collection shares at least one value."""

    field: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class Contains:
    """Case-insensitive literal substring match."""

    field: str
    value: str


@dataclass(frozen=True)
class TextMatch:
    """Any term found in any of the fields; hits also drive relevance."""

    terms: tuple[str, ...]
    fields: tuple[str, ...]


@dataclass(frozen=True)
class GeoWithin:
    latitude: float
    longitude: float
    radius_km: float


Predicate = Equals | Range | AnyOf | Contains | TextMatch | GeoWithin


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortKey:
    field: str
    direction: SortDirection = SortDirection.ASC


DEFAULT_SORT = (
    SortKey("featured", SortDirection.DESC),
    SortKey("created_at", SortDirection.DESC),
)


@dataclass
class PropertyQuery:
    """Everything the compiler needs to run one listing query."""

    predicates: list[Predicate] = dataclasses.field(default_factory=list)
    sort: tuple[SortKey, ...] = DEFAULT_SORT
    rank_by_relevance: bool = False

    def text_match(self) -> TextMatch | None:
        for predicate in self.predicates:
            if isinstance(predicate, TextMatch):
                return predicate
        return None
