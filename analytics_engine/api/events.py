from fastapi import APIRouter, Depends
from analytics_engine.api.dependencies import get_analytics_service
from analytics_engine.schemas.analytics import MessageResponse
from analytics_engine.schemas.event import EventRecord
from analytics_engine.services.analytics import AnalyticsService

router = APIRouter(prefix="/event", tags=["events"])


@router.post("", response_model=MessageResponse)
def ingest_event(
        event: EventRecord,
        service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Store a single event.

    - **name**: Event name, counted separately in `usages`
    - **createdAt**: Event time in epoch milliseconds
    - **type**: Partition the event is stored under
    - **uniqueId**: Optional tag usable as a query filter
    """
    service.submit_event(event)
    return MessageResponse(data="Event stored successfully!")
