# GET /stats

from fastapi import APIRouter, Depends
from analytics_engine.api.dependencies import get_system_stats_service
from analytics_engine.schemas.analytics import SystemStatsResponse
from analytics_engine.services.system_stats import SystemStatsService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=SystemStatsResponse)
def get_stats(service: SystemStatsService = Depends(get_system_stats_service)):
    """Key count, CPU, memory and uptime of this instance"""
    return SystemStatsResponse(data=service.collect())
