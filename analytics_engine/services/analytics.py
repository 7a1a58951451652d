from datetime import datetime, tzinfo
from typing import Any, Callable, Mapping, Optional, Union

import structlog

from analytics_engine.schemas.analytics import AggregationResult
from analytics_engine.schemas.event import EventRecord
from analytics_engine.services.aggregator import fold
from analytics_engine.services.bucketing import compute_cutoffs, parse_lookback
from analytics_engine.services.codec import parse_event
from analytics_engine.services.store import PartitionedEventStore

logger = structlog.get_logger()


class AnalyticsService:
    """Ingest, query and flush operations over the partitioned event store"""

    def __init__(
            self,
            store: PartitionedEventStore,
            max_age_days: int,
            clock: Optional[Callable[[], datetime]] = None,
            tz: Optional[tzinfo] = None
    ):
        self.store = store
        self.max_age_days = max_age_days
        self.tz = tz
        self.clock = clock or (lambda: datetime.now(tz))

    def submit_event(self, payload: Union[EventRecord, Mapping[str, Any]]) -> EventRecord:
        """Validate an event and append it to its type's partition"""
        event = parse_event(payload)
        partition = self.store.partition(event.event_type)

        self.store.append(partition.key, event, self.max_age_days)

        logger.info(
            "event_stored",
            partition_key=partition.key,
            event_name=event.name,
            created_at=event.created_at
        )
        return event

    def query_aggregation(
            self,
            event_type: str,
            lookback: Any = None,
            unique_id: Optional[str] = None
    ) -> AggregationResult:
        """
        Daily, weekly and monthly counts for one partition.

        One range fetch anchored at the monthly cutoff covers all three
        granularities; the narrower cutoffs are applied while folding.
        """
        lookback_days = parse_lookback(lookback)
        partition = self.store.partition(event_type)
        cutoffs = compute_cutoffs(self.clock(), lookback_days)

        events = self.store.range_from(partition.key, cutoffs.monthly)
        result = fold(events, cutoffs, identity_filter=unique_id, tz=self.tz)

        logger.info(
            "aggregation_query_executed",
            partition_key=partition.key,
            lookback_days=lookback_days,
            fetched=len(events),
            names=len(result.usages),
            filtered=bool(unique_id)
        )
        return result

    def flush_partition(self, event_type: str) -> None:
        partition = self.store.partition(event_type)
        self.store.delete_partition(partition.key)
