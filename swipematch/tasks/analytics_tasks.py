import logging

import httpx
import structlog

from swipematch.core.config import settings

logger = logging.getLogger(__name__)
event_log = structlog.get_logger("swipematch.analytics")


async def record_analytics_event(
    ctx: dict,
    event: str,
    user_id: str,
    properties: dict,
    timestamp: str,
) -> None:
    """
    ARQ task: record a product analytics event.

    Every event is written to the structured log. When ``ANALYTICS_URL`` is
    set it is also POSTed there; delivery failures are logged and dropped
    (analytics never retries into a backlog).
    """
    event_log.info(
        "analytics_event",
        event=event,
        user_id=user_id,
        timestamp=timestamp,
        **properties,
    )

    if not settings.analytics_url:
        return

    http_client: httpx.AsyncClient | None = ctx.get("http_client")
    if http_client is None:
        logger.warning(f"No HTTP client in worker context; dropping analytics event {event}")
        return

    payload = {
        "event": event,
        "distinct_id": user_id,
        "timestamp": timestamp,
        "properties": properties,
    }
    try:
        response = await http_client.post(settings.analytics_url, json=payload)
        response.raise_for_status()
        logger.debug(f"Delivered analytics event {event} for user {user_id}")
    except httpx.HTTPError as e:
        logger.warning(
            f"Failed to deliver analytics event {event} for user {user_id} "
            f"(try {ctx.get('job_try', '?')}): {e}"
        )
