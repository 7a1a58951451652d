from dataclasses import dataclass
from datetime import timedelta
from typing import List

import redis
import structlog

from analytics_engine.core.errors import StoreUnavailable
from analytics_engine.schemas.event import EventRecord
from analytics_engine.services.codec import encode_event

logger = structlog.get_logger()


@dataclass(frozen=True)
class Partition:
    """
    The stored events sharing one event type.

    A partition exists from its first append until its retention TTL runs out
    or it is flushed. Redis owns the lifetime; this object only names it.
    """

    prefix: str
    event_type: str

    @property
    def key(self) -> str:
        return f"{self.prefix}-{self.event_type}"


class PartitionedEventStore:
    """Redis sorted-set store, one key per partition, members scored by createdAt"""

    def __init__(self, redis_client: redis.Redis, prefix: str = "analyticsEngine"):
        self.redis_client = redis_client
        self.prefix = prefix

    def partition(self, event_type: str) -> Partition:
        return Partition(prefix=self.prefix, event_type=event_type)

    def append(self, partition_key: str, event: EventRecord, max_age_days: int) -> None:
        """Insert an event and re-arm the partition's expiry to now + max_age_days"""
        member = encode_event(event)

        try:
            pipe = self.redis_client.pipeline()
            pipe.zadd(partition_key, {member: event.created_at})
            pipe.expire(partition_key, timedelta(days=max_age_days))
            pipe.execute()
        except redis.RedisError as e:
            logger.error("partition_append_failed", partition_key=partition_key, error=str(e))
            raise StoreUnavailable("append", partition_key, e) from e

        logger.debug("event_appended", partition_key=partition_key, event_name=event.name)

    def range_from(self, partition_key: str, min_score: int) -> List[bytes]:
        """
        All serialized events scored >= min_score, as raw bytes.

        A missing or expired partition yields an empty list. Callers must not
        rely on the order of the result.
        """
        try:
            return self.redis_client.zrangebyscore(partition_key, min_score, "+inf")
        except redis.RedisError as e:
            logger.error("partition_range_failed", partition_key=partition_key, error=str(e))
            raise StoreUnavailable("range", partition_key, e) from e

    def delete_partition(self, partition_key: str) -> None:
        try:
            removed = self.redis_client.delete(partition_key)
        except redis.RedisError as e:
            logger.error("partition_delete_failed", partition_key=partition_key, error=str(e))
            raise StoreUnavailable("delete", partition_key, e) from e

        logger.info("partition_deleted", partition_key=partition_key, existed=bool(removed))

    def size(self) -> int:
        """Total number of keys in the Redis database"""
        try:
            return self.redis_client.dbsize()
        except redis.RedisError as e:
            logger.error("store_size_failed", error=str(e))
            raise StoreUnavailable("size", None, e) from e

    def ping(self) -> bool:
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError as e:
            logger.warning("store_ping_failed", error=str(e))
            return False
