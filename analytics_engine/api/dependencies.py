from fastapi import Request

from analytics_engine.core.config import settings
from analytics_engine.services.analytics import AnalyticsService
from analytics_engine.services.store import PartitionedEventStore
from analytics_engine.services.system_stats import SystemStatsService


def get_store(request: Request) -> PartitionedEventStore:
    """Store handle created during application startup"""
    return request.app.state.store


def get_analytics_service(request: Request) -> AnalyticsService:
    return AnalyticsService(get_store(request), settings.max_age_days)


def get_system_stats_service(request: Request) -> SystemStatsService:
    return SystemStatsService(get_store(request), request.app.state.started_at)
