"""Health check route."""

from fastapi import APIRouter

from hearth.schemas.common import ApiResponse, HealthStatus

router = APIRouter()


@router.get("/health", response_model=ApiResponse[HealthStatus])
def health_check() -> ApiResponse[HealthStatus]:
    """Liveness check."""
    return ApiResponse(data=HealthStatus(status="healthy", service="hearth"))
