import threading
import time
from typing import Optional

import psutil
import structlog

from analytics_engine.schemas.analytics import SystemStatsData
from analytics_engine.services.store import PartitionedEventStore

logger = structlog.get_logger()

_BYTE_UNITS = (("TB", 1 << 40), ("GB", 1 << 30), ("MB", 1 << 20), ("KB", 1 << 10))

_UPTIME_UNITS = (("mo", 2592000), ("d", 86400), ("h", 3600), ("m", 60), ("s", 1))


def format_bytes(size: int) -> str:
    for suffix, factor in _BYTE_UNITS:
        if size >= factor:
            return f"{size / factor:.2f}{suffix}"
    return f"{size}B"


def format_uptime(seconds: int) -> str:
    """Compact uptime such as '2d 3h 5s'; zero components are left out"""
    parts = []
    for suffix, length in _UPTIME_UNITS:
        amount, seconds = divmod(seconds, length)
        if amount:
            parts.append(f"{amount}{suffix}")
    return " ".join(parts)


class SystemStatsService:
    """Host and store statistics for the /stats route"""

    def __init__(self, store: PartitionedEventStore, started_at: float,
                 process: Optional[psutil.Process] = None):
        self.store = store
        self.started_at = started_at
        self.process = process or psutil.Process()

    def collect(self) -> SystemStatsData:
        ram_bytes = self.process.memory_info().rss
        uptime = max(int(time.time() - self.started_at), 0)

        stats = SystemStatsData(
            total_redis_keys=self.store.size(),
            cpu_usage=round(psutil.cpu_percent(interval=None), 2),
            ram_usage=format_bytes(ram_bytes),
            ram_usage_bytes=ram_bytes,
            system_uptime_seconds=uptime,
            system_uptime=format_uptime(uptime),
            threads=threading.active_count(),
        )
        logger.debug("system_stats_collected", total_redis_keys=stats.total_redis_keys)
        return stats
