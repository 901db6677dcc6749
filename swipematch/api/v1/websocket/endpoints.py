"""
WebSocket endpoint for live match notifications and chat.

Protocol:
1. Client connects and sends ``{"type": "authenticate", "token": ...}``
2. Server replies ``authenticated`` and joins the connection to ``user:<id>``
3. Client may then send:
   - ``join_match`` / ``leave_match`` with ``match_id``
   - ``send_message`` with ``match_id`` and ``body``
   - ``typing_start`` / ``typing_stop`` with ``match_id``
   - ``pong`` in answer to server ``ping``
4. Server pushes ``match_created``, ``message_new`` and ``typing`` events
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import json
from typing import Optional
from uuid import UUID
import asyncio
import structlog

from swipematch.core.config import settings
from swipematch.core.database import AsyncSessionLocal
from swipematch.core.exceptions import MatchingError
from swipematch.core.security import verify_token
from swipematch.core.websocket_manager import connection_manager, match_group
from swipematch.models.user import User, UserRole
from swipematch.services.match_service import MatchService
from swipematch.services.message_service import MessageService
from swipematch.services.notification_service import NotificationService
from swipematch.services.rate_limit_service import RateLimitService

logger = logging.getLogger(__name__)

router = APIRouter()


async def authenticate_websocket(token: str, db: AsyncSession) -> Optional[User]:
    """
    Authenticate a WebSocket connection using JWT token.

    Args:
        token: JWT token string
        db: Database session (should be short-lived)

    Returns:
        The active user whose role matches the token, None otherwise
    """
    claims = verify_token(token, "access")
    if claims is None:
        logger.debug("WebSocket auth failed: Invalid token")
        return None

    result = await db.execute(select(User).where(User.id == claims.user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        logger.debug(f"WebSocket auth failed: User not found or inactive: {claims.user_id}")
        return None
    if UserRole(user.role).value != claims.role:
        logger.debug(f"WebSocket auth failed: role mismatch for {claims.user_id}")
        return None

    return user


def _parse_match_id(message: dict) -> Optional[UUID]:
    try:
        return UUID(str(message.get("match_id")))
    except (ValueError, TypeError):
        return None


async def _send_error(websocket: WebSocket, code: str, message: str) -> None:
    await websocket.send_json({"type": "error", "code": code, "message": message})


async def _load_user(db: AsyncSession, user_id: UUID) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def handle_client_message(websocket: WebSocket, user_id: UUID, message: dict) -> None:
    """Dispatch one authenticated client frame."""
    msg_type = message.get("type")

    if msg_type == "pong":
        connection_manager.update_pong(websocket)
        return

    if msg_type not in ("join_match", "leave_match", "send_message", "typing_start", "typing_stop"):
        await _send_error(websocket, "UNKNOWN_MESSAGE_TYPE", f"Unsupported message type: {msg_type}")
        return

    match_id = _parse_match_id(message)
    if match_id is None:
        await _send_error(websocket, "INVALID_MATCH_ID", "match_id is required")
        return
    group = match_group(match_id)

    if msg_type == "leave_match":
        connection_manager.leave_group(websocket, group)
        await websocket.send_json({"type": "left_match", "match_id": str(match_id)})
        return

    if msg_type in ("typing_start", "typing_stop"):
        if not connection_manager.is_member(websocket, group):
            await _send_error(websocket, "NOT_IN_MATCH", "Join the match first")
            return
        await NotificationService().relay_typing(
            match_id, user_id, msg_type == "typing_start", sender=websocket
        )
        return

    # join_match and send_message need the database; keep the session short
    try:
        async with AsyncSessionLocal() as db:
            user = await _load_user(db, user_id)
            if user is None or not user.is_active:
                await _send_error(websocket, "UNAUTHORIZED", "User no longer active")
                return

            if msg_type == "join_match":
                await MatchService().get_match(db, match_id, user)
                connection_manager.join_group(websocket, group)
                await websocket.send_json({"type": "joined_match", "match_id": str(match_id)})
                return

            await RateLimitService().enforce_message_limit(user.id)
            await MessageService().send_message(db, match_id, user, message.get("body"))
    except MatchingError as e:
        await _send_error(websocket, e.code, str(e))


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for real-time match and chat events.

    Note:
    This endpoint does NOT use Depends(get_db) because that would keep
    a database connection open for the entire WebSocket lifetime. Sessions
    are opened per authenticated frame that needs one and closed at once.
    """
    authenticated = False
    user_id = None
    heartbeat_task = None

    try:
        await websocket.accept()

        try:
            auth_message = await asyncio.wait_for(
                websocket.receive_json(),
                timeout=settings.websocket_auth_timeout
            )
        except asyncio.TimeoutError:
            await _send_error(websocket, "AUTH_TIMEOUT", "Authentication timeout")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        if auth_message.get("type") != "authenticate":
            await _send_error(websocket, "AUTH_REQUIRED", "First message must be authentication")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        token = auth_message.get("token")
        if not token:
            await _send_error(websocket, "AUTH_REQUIRED", "Token is required")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        async with AsyncSessionLocal() as db:
            user = await authenticate_websocket(token, db)

        if user is None:
            await _send_error(websocket, "AUTH_FAILED", "Invalid or expired token")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        user_id = user.id
        structlog.contextvars.bind_contextvars(user_id=str(user_id))

        await connection_manager.connect(websocket, user_id)
        authenticated = True

        await websocket.send_json({
            "type": "authenticated",
            "user_id": str(user_id),
            "message": "Successfully authenticated"
        })
        logger.info(f"WebSocket authenticated: user={user_id}")

        heartbeat_task = asyncio.create_task(
            send_heartbeat(websocket, settings.websocket_heartbeat_interval)
        )

        while True:
            try:
                message = await websocket.receive_json()
                if not isinstance(message, dict):
                    await _send_error(websocket, "INVALID_MESSAGE_FORMAT", "Message must be a JSON object")
                    continue
                await handle_client_message(websocket, user_id, message)

            except WebSocketDisconnect:
                logger.info(f"WebSocket disconnected: user={user_id}")
                break
            except json.JSONDecodeError:
                await _send_error(websocket, "INVALID_MESSAGE_FORMAT", "Message must be valid JSON")

    except WebSocketDisconnect:
        logger.info("WebSocket closed before authentication completed")
    except Exception as e:
        logger.error(f"WebSocket error: {e}", exc_info=True)

    finally:
        if authenticated:
            connection_manager.disconnect(websocket)

        if heartbeat_task:
            heartbeat_task.cancel()
            try:
                await heartbeat_task
            except asyncio.CancelledError:
                pass


async def send_heartbeat(websocket: WebSocket, interval: int = 30):
    """
    Send periodic ping messages to keep connection alive.

    Args:
        websocket: WebSocket connection
        interval: Seconds between pings
    """
    try:
        while True:
            await asyncio.sleep(interval)
            await websocket.send_json({"type": "ping"})
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.error(f"Heartbeat error: {e}")
