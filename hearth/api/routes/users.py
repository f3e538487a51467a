"""User profile, own-listing and wishlist API routes."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hearth.api.dependencies import get_current_user
from hearth.api.routes.properties import property_page
from hearth.core.database import get_db
from hearth.models.user import User
from hearth.schemas.common import ApiResponse, Page, PaginationOut
from hearth.schemas.property import PropertyResponse
from hearth.schemas.user import UserCreate, UserResponse
from hearth.schemas.wishlist import WishlistAdd, WishlistItemDetail, WishlistItemResponse
from hearth.services import property as property_service
from hearth.services import user as user_service
from hearth.services import wishlist as wishlist_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=ApiResponse[UserResponse], status_code=201)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
) -> ApiResponse[UserResponse]:
    """Register a user profile."""
    user = user_service.create_user(db, user_data)
    return ApiResponse(message="User registered successfully", data=UserResponse.model_validate(user))


@router.get("/me", response_model=ApiResponse[UserResponse])
def get_me(current_user: User = Depends(get_current_user)) -> ApiResponse[UserResponse]:
    """Get the caller's own profile."""
    return ApiResponse(data=UserResponse.model_validate(current_user))


@router.get("/properties", response_model=ApiResponse[Page[PropertyResponse]])
def my_properties(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[Page[PropertyResponse]]:
    """The caller's listings in every status."""
    items, pagination = property_service.list_owned_properties(db, current_user, request.query_params)
    return ApiResponse(data=property_page(items, pagination))


@router.get("/wishlist", response_model=ApiResponse[Page[WishlistItemResponse]])
def get_wishlist(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[Page[WishlistItemResponse]]:
    items, pagination = wishlist_service.list_wishlist(db, current_user, request.query_params)
    return ApiResponse(
        data=Page[WishlistItemResponse](
            items=[WishlistItemResponse.model_validate(i) for i in items],
            pagination=PaginationOut.model_validate(pagination),
        )
    )


@router.post("/wishlist/{property_id}", response_model=ApiResponse[WishlistItemDetail], status_code=201)
def add_to_wishlist(
    property_id: int,
    body: WishlistAdd | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[WishlistItemDetail]:
    """Save a property, with optional notes."""
    item = wishlist_service.add_to_wishlist(db, current_user, property_id, body.notes if body else None)
    return ApiResponse(
        message="Property added to wishlist",
        data=WishlistItemDetail(wishlist_item=WishlistItemResponse.model_validate(item)),
    )


@router.delete("/wishlist/{property_id}", response_model=ApiResponse[None])
def remove_from_wishlist(
    property_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[None]:
    wishlist_service.remove_from_wishlist(db, current_user, property_id)
    return ApiResponse(message="Property removed from wishlist")
