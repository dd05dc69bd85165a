"""
Rate Limiting Module

Sliding-window rate limiting backed by Redis sorted sets, falling back to
in-memory storage if Redis is unavailable.

SECURITY: applied to endpoints that can be abused for brute force or email
bombing (login, forgot-password, activation resend).
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import HTTPException, Request, status
from redis.exceptions import RedisError

from app.core.redis import get_redis

logger = logging.getLogger(__name__)

# In-memory fallback: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(client, key: str, limit: int, window_seconds: int) -> bool:
    now = time.time()

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, now - window_seconds)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)
    results = await pipe.execute()

    return results[1] < limit


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """Per-process only; does not work across multiple instances."""
    now = time.time()
    window = [ts for ts in _memory_store.get(key, []) if ts > now - window_seconds]

    if len(window) >= limit:
        _memory_store[key] = window
        return False

    window.append(now)
    _memory_store[key] = window
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check if a request is within rate limits.

    Returns:
        True if the request is allowed, False if the limit is exceeded
    """
    client = await get_redis()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except RedisError as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


def rate_limit(
    scope: str,
    limit: int = 10,
    window_seconds: int = 60,
) -> Callable[[Request], Awaitable[None]]:
    """
    Build a dependency limiting requests per client IP for ``scope``.

    Usage:
        @router.post("/forgot-password", dependencies=[Depends(rate_limit("forgot", 5, 3600))])
    """

    async def dependency(request: Request) -> None:
        client_ip = request.client.host if request.client else "unknown"
        key = f"rate_limit:{scope}:{client_ip}"

        if not await check_rate_limit(key, limit, window_seconds):
            logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
            raise RateLimitExceeded(limit, window_seconds)

    return dependency


__all__ = [
    "rate_limit",
    "check_rate_limit",
    "RateLimitExceeded",
]
