from datetime import tzinfo
from typing import Iterable, Optional, Union

import structlog

from analytics_engine.schemas.analytics import GRANULARITIES, AggregationResult, CountTables
from analytics_engine.services.bucketing import Cutoffs, bucket_keys
from analytics_engine.services.codec import decode_event

logger = structlog.get_logger()


def _increment(table: dict, label: str) -> None:
    table[label] = table.get(label, 0) + 1


def fold(
        events: Iterable[Union[str, bytes]],
        cutoffs: Cutoffs,
        identity_filter: Optional[str] = None,
        tz: Optional[tzinfo] = None
) -> AggregationResult:
    """
    Count serialized events into global and per-name tables.

    Each granularity is counted only when the event is at or after that
    granularity's cutoff. Malformed records are skipped. With an
    identity_filter, only events whose uniqueId equals it are counted.
    """
    result = AggregationResult()
    skipped = 0

    for raw in events:
        event = decode_event(raw)
        if event is None:
            skipped += 1
            continue

        if identity_filter and event.unique_id != identity_filter:
            continue

        usage = result.usages.setdefault(event.name, CountTables())
        keys = bucket_keys(event.created_at, tz)

        for granularity in GRANULARITIES:
            if event.created_at < getattr(cutoffs, granularity):
                continue
            label = getattr(keys, granularity)
            _increment(getattr(result.global_, granularity), label)
            _increment(getattr(usage, granularity), label)

    if skipped:
        logger.warning("malformed_events_skipped", count=skipped)

    return result
