"""
Redis Configuration

Async Redis clients for rate limiting and the notification stream.

- A shared client (init_redis/get_redis) serves request-scoped work.
- create_redis_client builds independent connections for the notification
  publisher (one per publish) and the long-lived stream consumer.
"""

from redis.asyncio import Redis, from_url
from redis.exceptions import ResponseError

from app.core.config import settings

# Shared client instance
redis_client: Redis | None = None


def create_redis_client(
    *,
    socket_timeout: float | None = None,
    socket_connect_timeout: float | None = None,
) -> Redis:
    """Create a new client that the caller owns and must close."""
    return from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_connect_timeout,
    )


async def ensure_consumer_group(client: Redis, stream: str, group: str) -> None:
    """
    Declare a stream and its consumer group if they do not exist yet.

    Called by both publisher and consumer so whichever starts first creates
    the stream. A BUSYGROUP reply means it already exists.
    """
    try:
        await client.xgroup_create(name=stream, groupname=group, id="0", mkstream=True)
    except ResponseError as e:
        if "BUSYGROUP" not in str(e):
            raise


async def init_redis() -> Redis:
    """
    Initialize the shared Redis connection.

    Call this on application startup.
    """
    global redis_client
    client = create_redis_client()
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise
    redis_client = client
    return redis_client


async def get_redis() -> Redis | None:
    """
    Get the shared Redis client.

    Returns None if Redis is not available (optional dependency).
    """
    return redis_client


async def close_redis() -> None:
    """Close the shared Redis connection."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
