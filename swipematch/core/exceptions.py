"""
Domain errors raised by the matching services.

Every error carries the HTTP status and a stable machine-readable code so the
API layer can render it without knowing the individual classes. The
WebSocket endpoint reuses ``str(exc)`` for its ``error`` frames.
"""

import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MatchingError(Exception):
    """Base exception for matching-engine errors."""

    status_code: int = 400
    code: str = "matching_error"
    default_message: str = "Request could not be processed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class InvalidTargetForRole(MatchingError):
    """Candidate swiped on a non-job or recruiter on a non-candidate."""
    status_code = 400
    code = "invalid_target_for_role"
    default_message = "This role cannot swipe on that target type"


class DuplicateSwipe(MatchingError):
    status_code = 409
    code = "duplicate_swipe"
    default_message = "You have already swiped on this target"


class TargetNotFound(MatchingError):
    status_code = 404
    code = "target_not_found"
    default_message = "Swipe target not found"


class TargetUnavailable(MatchingError):
    status_code = 400
    code = "target_unavailable"
    default_message = "Job is no longer open"


class MatchNotFound(MatchingError):
    status_code = 404
    code = "match_not_found"
    default_message = "Match not found"


class Forbidden(MatchingError):
    status_code = 403
    code = "forbidden"
    default_message = "You do not have access to this match"


class InvalidCooldown(MatchingError):
    status_code = 400
    code = "invalid_cooldown"
    default_message = "cooldown_days must be between 1 and 90"


class InvalidMessage(MatchingError):
    status_code = 400
    code = "invalid_message"
    default_message = "Message body is required"


class RateLimitExceeded(MatchingError):
    status_code = 429
    code = "rate_limited"
    default_message = "Too many requests"

    def __init__(self, retry_after: int, message: Optional[str] = None):
        super().__init__(message)
        self.retry_after = retry_after


class MatchAlreadyExists(MatchingError):
    """Unique violation on (candidate, job). Resolved internally, never rendered."""
    status_code = 409
    code = "match_exists"
    default_message = "Match already exists"


async def matching_exception_handler(request: Request, exc: MatchingError) -> JSONResponse:
    """Render a MatchingError as ``{"detail", "code"}`` with its status."""
    logger.info(
        "Request rejected: %s %s -> %s (%s)",
        request.method, request.url.path, exc.code, exc,
    )
    headers = None
    if isinstance(exc, RateLimitExceeded):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "code": exc.code},
        headers=headers,
    )
