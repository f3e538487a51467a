"""Shared Pydantic schemas: camelCase base model and the response envelope."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """Uniform envelope wrapping every response body."""

    success: bool = True
    message: str | None = None
    data: T | None = None


class PaginationOut(CamelModel):
    """Result-set metadata for a paginated list."""

    current: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool
    next: int | None = None
    prev: int | None = None


class Page(CamelModel, Generic[T]):
    """A window of items plus its pagination metadata."""

    items: list[T]
    pagination: PaginationOut


class ErrorDetail(CamelModel):
    """A single field-level validation failure."""

    field: str
    message: str


class ErrorResponse(CamelModel):
    """Envelope for failed requests."""

    success: bool = False
    message: str
    errors: list[ErrorDetail] | None = None


class HealthStatus(CamelModel):
    status: str
    service: str
