"""Pagination engine: page/limit parsing, windowing and result metadata."""

import math
from collections.abc import Mapping
from dataclasses import dataclass

from hearth.core.config import settings
from hearth.core.errors import ValidationError


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Pagination:
    """Metadata describing one window of a result set."""

    current: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool
    next: int | None
    prev: int | None


def _parse_int(raw: str | None, name: str, default: int) -> int:
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ValidationError(name, f"{name} must be an integer") from None


def parse_page_request(
    params: Mapping[str, str],
    default_limit: int | None = None,
    max_limit: int | None = None,
) -> PageRequest:
    """
    Read ``page`` and ``limit`` from query parameters.

    Out-of-range values are clamped: page to at least 1, limit to
    [1, max_limit]. Non-integer values are rejected.
    """
    default_limit = default_limit or settings.DEFAULT_PAGE_LIMIT
    max_limit = max_limit or settings.MAX_PAGE_LIMIT

    page = _parse_int(params.get("page"), "page", 1)
    limit = _parse_int(params.get("limit"), "limit", default_limit)
    return PageRequest(page=max(page, 1), limit=min(max(limit, 1), max_limit))


def build_pagination(request: PageRequest, total: int) -> Pagination:
    """Compute metadata for ``request`` over ``total`` matching records."""
    pages = math.ceil(total / request.limit) if total else 0
    has_next = request.page < pages
    has_prev = request.page > 1
    return Pagination(
        current=request.page,
        limit=request.limit,
        total=total,
        pages=pages,
        has_next=has_next,
        has_prev=has_prev,
        next=request.page + 1 if has_next else None,
        prev=request.page - 1 if has_prev else None,
    )
