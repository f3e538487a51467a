"""Property API routes."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hearth.api.dependencies import get_current_user, get_optional_user
from hearth.core.database import get_db
from hearth.models.property import Property
from hearth.models.user import User
from hearth.schemas.common import ApiResponse, Page, PaginationOut
from hearth.schemas.property import PropertyCreate, PropertyDetail, PropertyResponse, PropertyUpdate
from hearth.services import property as property_service
from hearth.services.pagination import Pagination, parse_page_request

router = APIRouter(prefix="/properties", tags=["properties"])


def _is_admin(user: User | None) -> bool:
    return user is not None and user.get_is_admin()


def property_page(items: list[Property], pagination: Pagination) -> Page[PropertyResponse]:
    return Page[PropertyResponse](
        items=[PropertyResponse.model_validate(p) for p in items],
        pagination=PaginationOut.model_validate(pagination),
    )


def _detail(db_property: Property) -> PropertyDetail:
    return PropertyDetail(property=PropertyResponse.model_validate(db_property))


@router.get("", response_model=ApiResponse[Page[PropertyResponse]])
def list_properties(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
) -> ApiResponse[Page[PropertyResponse]]:
    """List listings with filters, sort and pagination."""
    items, pagination = property_service.list_properties(
        db, request.query_params, privileged=_is_admin(current_user)
    )
    return ApiResponse(data=property_page(items, pagination))


@router.get("/search", response_model=ApiResponse[Page[PropertyResponse]])
def search_properties(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
) -> ApiResponse[Page[PropertyResponse]]:
    """Search listings by text and location on top of the listing filters."""
    items, pagination = property_service.search_properties(
        db, request.query_params, privileged=_is_admin(current_user)
    )
    return ApiResponse(data=property_page(items, pagination))


@router.get("/trending", response_model=ApiResponse[list[PropertyResponse]])
def trending_properties(
    request: Request,
    db: Session = Depends(get_db),
) -> ApiResponse[list[PropertyResponse]]:
    """Most viewed active listings."""
    limit = parse_page_request(request.query_params, default_limit=10, max_limit=50).limit
    items = property_service.get_trending_properties(db, limit)
    return ApiResponse(data=[PropertyResponse.model_validate(p) for p in items])


@router.post("", response_model=ApiResponse[PropertyDetail], status_code=201)
def create_property(
    property_data: PropertyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[PropertyDetail]:
    """Create a listing; it awaits moderation before going public."""
    db_property = property_service.create_property(db, property_data, current_user)
    return ApiResponse(message="Property created successfully", data=_detail(db_property))


@router.get("/{property_id}/similar", response_model=ApiResponse[list[PropertyResponse]])
def similar_properties(
    property_id: int,
    request: Request,
    db: Session = Depends(get_db),
) -> ApiResponse[list[PropertyResponse]]:
    """Comparable active listings in the same city."""
    limit = parse_page_request(request.query_params, default_limit=5, max_limit=20).limit
    items = property_service.get_similar_properties(db, property_id, limit)
    return ApiResponse(data=[PropertyResponse.model_validate(p) for p in items])


@router.get("/{property_id}", response_model=ApiResponse[PropertyDetail])
def get_property(
    property_id: int,
    db: Session = Depends(get_db),
) -> ApiResponse[PropertyDetail]:
    """Get a listing and count the view."""
    db_property = property_service.view_property(db, property_id)
    return ApiResponse(data=_detail(db_property))


@router.put("/{property_id}", response_model=ApiResponse[PropertyDetail])
def update_property(
    property_id: int,
    property_data: PropertyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[PropertyDetail]:
    """Update a listing (owner or admin)."""
    db_property = property_service.update_property(db, property_id, property_data, current_user)
    return ApiResponse(message="Property updated successfully", data=_detail(db_property))


@router.delete("/{property_id}", response_model=ApiResponse[None])
def delete_property(
    property_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[None]:
    """Withdraw a listing (owner or admin)."""
    property_service.delete_property(db, property_id, current_user)
    return ApiResponse(message="Property deleted successfully")
