"""
Notification fan-out for the matching engine.

Pushes match and chat events to live WebSocket connections. Delivery is
best-effort and at-most-once: users without a live connection simply miss
the push (matches and messages stay readable over HTTP), and a failed send
is logged, never raised back into the swipe or message flow.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
import logging

from fastapi import WebSocket

from swipematch.core.background import fire_and_forget
from swipematch.core.websocket_manager import ConnectionManager, connection_manager, match_group
from swipematch.models.match import Match
from swipematch.models.message import Message

logger = logging.getLogger(__name__)


def match_event(match: Match) -> dict:
    return {
        "type": "match_created",
        "match_id": str(match.id),
        "candidate_user_id": str(match.candidate_user_id),
        "recruiter_user_id": str(match.recruiter_user_id),
        "job_id": str(match.job_id),
        "created_at": match.created_at.isoformat() if match.created_at else None,
        "message": "You have a new match!",
    }


def message_event(message: Message) -> dict:
    return {
        "type": "message_new",
        "message": {
            "id": str(message.id),
            "match_id": str(message.match_id),
            "sender_id": str(message.sender_id),
            "body": message.body,
            "created_at": message.created_at.isoformat() if message.created_at else None,
        },
    }


class NotificationService:
    """
    Service for pushing real-time events.

    This service coordinates:
    - Match notifications to both parties' ``user:`` groups
    - Chat message broadcast to a ``match:`` group
    - Typing indicators relayed to the other party
    """

    def __init__(self, manager: Optional[ConnectionManager] = None):
        """
        Args:
            manager: ConnectionManager instance (the process-wide one if None)
        """
        self.manager = manager or connection_manager

    def notify_match(self, match: Match) -> None:
        """
        Schedule delivery of a match notification to both parties.

        Returns immediately; the push runs as a background task.
        """
        event = match_event(match)
        for user_id in (match.candidate_user_id, match.recruiter_user_id):
            fire_and_forget(self._deliver(user_id, event), name=f"notify_match:{match.id}")

    async def _deliver(self, user_id: UUID, event: dict) -> int:
        try:
            delivered = await self.manager.send_to_user(user_id, event)
            if delivered == 0:
                logger.debug(f"User {user_id} offline, {event['type']} not pushed")
            return delivered
        except Exception as e:
            logger.error(f"Failed to push {event.get('type')} to user {user_id}: {e}")
            return 0

    async def broadcast_message(self, message: Message) -> int:
        """
        Broadcast a persisted chat message to the match group.

        Returns:
            Number of live connections reached (0 on failure)
        """
        try:
            return await self.manager.broadcast(match_group(message.match_id), message_event(message))
        except Exception as e:
            logger.error(f"Failed to broadcast message {message.id} to match {message.match_id}: {e}")
            return 0

    def end_match(self, match_id: UUID) -> int:
        """
        Evict every connection from a deleted match's group.

        Chat and typing frames for the match stop reaching the former
        partner; clients must ``join_match`` again, which fails once the
        match is gone.
        """
        evicted = self.manager.close_group(match_group(match_id))
        logger.debug(f"Match {match_id} ended, {evicted} connections left its group")
        return evicted

    async def relay_typing(
        self,
        match_id: UUID,
        user_id: UUID,
        is_typing: bool,
        sender: Optional[WebSocket] = None,
    ) -> int:
        """Relay a typing indicator to the match group, skipping the sender."""
        event = {
            "type": "typing",
            "match_id": str(match_id),
            "user_id": str(user_id),
            "is_typing": is_typing,
        }
        try:
            return await self.manager.broadcast(match_group(match_id), event, exclude=sender)
        except Exception as e:
            logger.error(f"Failed to relay typing for match {match_id}: {e}")
            return 0
