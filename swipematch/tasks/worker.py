import logging

import httpx
from arq.connections import RedisSettings

from swipematch.core.config import settings
from swipematch.core.logging import configure_logging
from swipematch.tasks.analytics_tasks import record_analytics_event

logger = logging.getLogger(__name__)


async def on_startup(ctx: dict) -> None:
    configure_logging(settings.app_env)
    ctx["http_client"] = httpx.AsyncClient(timeout=10.0)
    logger.info("ARQ worker started. Functions: record_analytics_event")


async def on_shutdown(ctx: dict) -> None:
    http_client: httpx.AsyncClient | None = ctx.get("http_client")
    if http_client is not None:
        await http_client.aclose()
    logger.info("ARQ worker shut down. HTTP client closed.")


class WorkerSettings:
    functions = [
        record_analytics_event,
    ]
    redis_settings = RedisSettings.from_dsn(settings.redis_url)
    max_jobs = 10
    job_timeout = 30
    max_tries = 1       # Analytics is at-most-once
    on_startup = on_startup
    on_shutdown = on_shutdown
