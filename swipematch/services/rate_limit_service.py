"""
Rate limiting for swipes and chat messages.

Uses Redis sorted sets (sliding window algorithm) so limits hold across API
workers. Falls back gracefully if Redis is unavailable.
"""
import logging
import time
from typing import Tuple
from uuid import UUID

from swipematch.core import cache
from swipematch.core.config import settings
from swipematch.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

SWIPE_WINDOW_SECONDS = 24 * 60 * 60


class RateLimitService:
    """
    Rate limiting service backed by Redis sliding-window counters.

    ``check_rate_limit(key, max_requests, window_seconds)`` records and
    evaluates the current request against a per-key sorted-set counter.
    The ``enforce_*`` helpers raise ``RateLimitExceeded`` for the two
    limits the matching API applies.
    """

    async def check_rate_limit(
        self,
        key: str,
        max_requests: int,
        window_seconds: int,
    ) -> Tuple[bool, int]:
        """
        Check whether the caller identified by *key* has exceeded the rate
        limit, and record the current request.

        Args:
            key:            Redis key of the bucket, see ``cache.rate_limit_key``.
            max_requests:   Requests allowed inside *window_seconds*.
            window_seconds: Length of the sliding window in seconds.

        Returns:
            Tuple of (is_allowed, retry_after_seconds).
            ``retry_after_seconds`` is 0 when allowed, otherwise the number
            of seconds until the oldest request in the window expires.
        """
        try:
            r = await cache.get_redis()
            now = time.time()
            window_start = now - window_seconds

            pipe = r.pipeline()
            # Drop entries that have fallen outside the window.
            pipe.zremrangebyscore(key, 0, window_start)
            # Unique member per request, scored by time.
            pipe.zadd(key, {f"{now}:{time.monotonic_ns()}": now})
            pipe.zcard(key)
            pipe.expire(key, window_seconds)
            results = await pipe.execute()

            count: int = results[2]

            if count > max_requests:
                oldest = await r.zrange(key, 0, 0, withscores=True)
                if oldest:
                    retry_after = max(int(window_seconds - (now - oldest[0][1])), 1)
                else:
                    retry_after = window_seconds
                return False, retry_after

            return True, 0

        except Exception:
            # Fail open rather than blocking every swipe when Redis is down.
            logger.warning(
                "Rate limit check failed for key '%s', failing open",
                key,
                exc_info=True,
            )
            return True, 0

    async def enforce_swipe_limit(self, user_id: UUID) -> None:
        allowed, retry_after = await self.check_rate_limit(
            cache.swipe_limit_key(user_id), settings.swipe_daily_limit, SWIPE_WINDOW_SECONDS
        )
        if not allowed:
            logger.info(f"Swipe limit reached for user {user_id}")
            raise RateLimitExceeded(
                retry_after,
                f"Daily swipe limit of {settings.swipe_daily_limit} reached",
            )

    async def enforce_message_limit(self, user_id: UUID) -> None:
        allowed, retry_after = await self.check_rate_limit(
            cache.message_limit_key(user_id),
            settings.message_rate_limit,
            settings.message_rate_window_seconds,
        )
        if not allowed:
            logger.info(f"Message limit reached for user {user_id}")
            raise RateLimitExceeded(retry_after, "You are sending messages too quickly")
