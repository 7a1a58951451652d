from pydantic import BaseModel, ConfigDict, Field
from typing import Dict

GRANULARITIES = ("daily", "weekly", "monthly")


class CountTables(BaseModel):
    """Counts per bucket label, one table per granularity"""
    daily: Dict[str, int] = Field(default_factory=dict)
    weekly: Dict[str, int] = Field(default_factory=dict)
    monthly: Dict[str, int] = Field(default_factory=dict)


class AggregationResult(BaseModel):
    """Global counts plus a breakdown per event name"""
    global_: CountTables = Field(default_factory=CountTables, alias="global")
    usages: Dict[str, CountTables] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class AnalyticsResponse(BaseModel):
    status: int = 200
    data: AggregationResult


class MessageResponse(BaseModel):
    status: int = 200
    data: str


class SystemStatsData(BaseModel):
    total_redis_keys: int
    cpu_usage: float
    ram_usage: str
    ram_usage_bytes: int
    system_uptime_seconds: int
    system_uptime: str
    threads: int


class SystemStatsResponse(BaseModel):
    status: int = 200
    data: SystemStatsData
