"""
Structured logging configuration using structlog.

In development (app_env=dev): colored console output.
Everywhere else: JSON lines with timestamp, level, logger name and every
bound context var (request_id, user_id, ...).

Usage:
    from swipematch.core.logging import configure_logging
    configure_logging(app_env="dev")

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("match created", match_id=str(match.id))

    # stdlib loggers are bridged and come out structured too
    import logging
    logging.getLogger(__name__).info("swipe recorded")

The HTTP middleware in swipematch.main binds a request_id per request via
``bind_request_context``; WebSocket handlers bind the connected user_id.
"""

import logging
import sys
import uuid
from typing import Optional

import structlog


def configure_logging(app_env: str = "dev") -> None:
    """
    Configure structlog with a stdlib bridge so all loggers (including
    uvicorn and sqlalchemy) produce structured output.

    Args:
        app_env: "dev" → ConsoleRenderer; anything else → JSONRenderer.
    """
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if app_env == "dev":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.INFO)

    if app_env != "dev":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def bind_request_context(request_id: Optional[str] = None, **extra) -> str:
    """Reset contextvars and bind a request id (generated when missing)."""
    request_id = request_id or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **extra)
    return request_id
