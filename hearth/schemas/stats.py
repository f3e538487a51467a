"""Admin dashboard schemas."""

from hearth.schemas.common import CamelModel


class DashboardStatsResponse(CamelModel):
    """Marketplace totals; ``recent*`` counts cover the last 30 days."""

    total_users: int
    total_properties: int
    active_properties: int
    pending_properties: int
    total_inquiries: int
    recent_users: int
    recent_properties: int
    users_by_role: dict[str, int]
    properties_by_type: dict[str, int]
