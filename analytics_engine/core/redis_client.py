# Redis connection

import redis
import structlog

logger = structlog.get_logger()


def create_redis_client(redis_url: str) -> redis.Redis:
    """
    Connect to Redis and verify the connection with a PING

    Responses stay as bytes; stored members are decoded by the event codec.
    """
    try:
        client = redis.from_url(redis_url, decode_responses=False)
        # Test connection
        client.ping()
        logger.info("redis_connected", redis_url=redis_url)
        return client
    except redis.RedisError as e:
        logger.error("redis_connection_failed", error=str(e), redis_url=redis_url)
        raise
