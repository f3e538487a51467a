"""Admin moderation and dashboard API routes."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from hearth.api.dependencies import require_admin
from hearth.api.routes.properties import property_page
from hearth.core.database import get_db
from hearth.models.user import User
from hearth.schemas.common import ApiResponse, Page
from hearth.schemas.property import ModerationRequest, PropertyDetail, PropertyResponse
from hearth.schemas.stats import DashboardStatsResponse
from hearth.services import property as property_service
from hearth.services import stats as stats_service

router = APIRouter(prefix="/admin", tags=["admin"])

MODERATION_MESSAGES = {
    "approve": "Property approved successfully",
    "reject": "Property rejected successfully",
}


@router.get("/stats", response_model=ApiResponse[DashboardStatsResponse])
def dashboard_stats(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ApiResponse[DashboardStatsResponse]:
    """Marketplace totals and breakdowns."""
    stats = stats_service.get_dashboard_stats(db)
    return ApiResponse(data=DashboardStatsResponse.model_validate(stats))


@router.get("/properties", response_model=ApiResponse[Page[PropertyResponse]])
def moderation_queue(
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ApiResponse[Page[PropertyResponse]]:
    """Listings in any status, newest first."""
    items, pagination = property_service.list_for_moderation(db, request.query_params)
    return ApiResponse(data=property_page(items, pagination))


@router.put("/properties/{property_id}/moderate", response_model=ApiResponse[PropertyDetail])
def moderate_property(
    property_id: int,
    moderation: ModerationRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ApiResponse[PropertyDetail]:
    """Approve or reject a listing."""
    db_property = property_service.moderate_property(db, property_id, moderation.action, admin)
    return ApiResponse(
        message=MODERATION_MESSAGES[moderation.action],
        data=PropertyDetail(property=PropertyResponse.model_validate(db_property)),
    )
