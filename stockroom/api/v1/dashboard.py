"""
Dashboard API endpoint.
"""

from fastapi import APIRouter

from stockroom.api.deps import ReportingServiceDep
from stockroom.schemas.reports import DashboardOverview

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardOverview,
    summary="Dashboard overview",
    description="Summary counts, stock value and products under the dashboard threshold",
)
async def dashboard(service: ReportingServiceDep) -> DashboardOverview:
    return await service.dashboard()
