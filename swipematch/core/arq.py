import logging
from typing import Any, Optional

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings

from swipematch.core.config import settings

logger = logging.getLogger(__name__)

_arq_pool: Optional[ArqRedis] = None


async def get_arq_pool() -> ArqRedis:
    global _arq_pool
    if _arq_pool is None:
        _arq_pool = await create_pool(RedisSettings.from_dsn(settings.redis_url))
        logger.info("ARQ pool created")
    return _arq_pool


async def enqueue(function: str, *args: Any, **kwargs: Any) -> None:
    """Enqueue a worker job, logging instead of raising when the queue is down."""
    try:
        pool = await get_arq_pool()
        await pool.enqueue_job(function, *args, **kwargs)
    except Exception:
        logger.warning("Failed to enqueue ARQ job %s", function, exc_info=True)


async def close_arq_pool() -> None:
    global _arq_pool
    if _arq_pool:
        await _arq_pool.close()
        _arq_pool = None
