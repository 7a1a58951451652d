# GET/DELETE /analytics

from fastapi import APIRouter, Depends, Query
from typing import Optional
from analytics_engine.api.dependencies import get_analytics_service
from analytics_engine.schemas.analytics import AnalyticsResponse, MessageResponse
from analytics_engine.services.analytics import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsResponse)
def get_analytics(
        event_type: str = Query(..., alias="type", min_length=1, description="Event type partition"),
        lookback: Optional[str] = Query(default=None, description="Lookback in days (default 7)"),
        unique_id: Optional[str] = Query(default=None, alias="uniqueId", description="Only count events with this uniqueId"),
        service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Count events of one type into daily, weekly and monthly buckets.

    - **type**: Partition to aggregate
    - **lookback**: Daily window in days; the weekly window is 7x and the
      monthly window is the same number of months. Invalid values fall back to 7
    - **uniqueId**: Optional identity filter
    """
    result = service.query_aggregation(event_type, lookback, unique_id)
    return AnalyticsResponse(data=result)


@router.delete("", response_model=MessageResponse)
def flush_analytics(
        event_type: str = Query(..., alias="type", min_length=1, description="Event type partition"),
        service: AnalyticsService = Depends(get_analytics_service)
):
    """Delete every stored event of one type"""
    service.flush_partition(event_type)
    return MessageResponse(data="Data flushed successfully!")
