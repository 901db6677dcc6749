"""
Shared Redis connection pool and key layout.

The rate limiter is the only Redis user: each sliding-window bucket is a
sorted set under ``ratelimit:{scope}:{subject}``.
"""
import logging
from typing import Optional, Union
from uuid import UUID

from redis.asyncio import Redis, ConnectionPool

from swipematch.core.config import settings

logger = logging.getLogger(__name__)

RATE_LIMIT_PREFIX = "ratelimit"
SWIPE_SCOPE = "swipe"
MESSAGE_SCOPE = "message"

_pool: Optional[ConnectionPool] = None


def rate_limit_key(scope: str, subject: Union[str, UUID]) -> str:
    """Redis key of one rate-limit bucket, e.g. ``ratelimit:swipe:<user id>``."""
    if not scope or ":" in scope:
        raise ValueError(f"Invalid rate limit scope: {scope!r}")
    return f"{RATE_LIMIT_PREFIX}:{scope}:{subject}"


def swipe_limit_key(user_id: UUID) -> str:
    return rate_limit_key(SWIPE_SCOPE, user_id)


def message_limit_key(user_id: UUID) -> str:
    return rate_limit_key(MESSAGE_SCOPE, user_id)


async def get_redis_pool() -> ConnectionPool:
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_pool_size,
            decode_responses=True,
        )
        logger.info("Redis connection pool created: %s", settings.redis_url)
    return _pool


async def get_redis() -> Redis:
    pool = await get_redis_pool()
    return Redis(connection_pool=pool)


async def close_redis_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.aclose()
        _pool = None
        logger.info("Redis connection pool closed")
