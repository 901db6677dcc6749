"""
Chat between the two parties of a match.

Messages are persisted and committed first; the live broadcast to the
match group happens afterwards and is best-effort.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from swipematch.core.config import settings
from swipematch.core.exceptions import InvalidMessage
from swipematch.models.message import Message
from swipematch.models.user import User
from swipematch.repositories.message_repository import MessageRepository
from swipematch.services.analytics_service import AnalyticsService
from swipematch.services.match_service import MatchService
from swipematch.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class MessageService:
    """Service for sending and reading match messages."""

    def __init__(
        self,
        message_repo: Optional[MessageRepository] = None,
        match_service: Optional[MatchService] = None,
        notification_service: Optional[NotificationService] = None,
        analytics_service: Optional[AnalyticsService] = None
    ):
        self.message_repo = message_repo or MessageRepository()
        self.match_service = match_service or MatchService()
        self.notification_service = notification_service or NotificationService()
        self.analytics_service = analytics_service or AnalyticsService()

    @staticmethod
    def clean_body(body: Optional[str]) -> str:
        """
        Raises:
            InvalidMessage: If the body is blank or too long
        """
        text = (body or "").strip()
        if not text:
            raise InvalidMessage()
        if len(text) > settings.message_max_length:
            raise InvalidMessage(f"Message exceeds {settings.message_max_length} characters")
        return text

    async def send_message(
        self,
        db: AsyncSession,
        match_id: UUID,
        sender: User,
        body: str
    ) -> Message:
        """
        Persist a message from one match party and broadcast it.

        Raises:
            MatchNotFound: If the match does not exist (or was unmatched)
            Forbidden: If the sender is not a party to the match
            InvalidMessage: If the body is blank or too long
        """
        text = self.clean_body(body)
        match = await self.match_service.get_match(db, match_id, sender)

        message = await self.message_repo.create(
            db,
            {"match_id": match.id, "sender_id": sender.id, "body": text},
        )
        await db.commit()
        logger.info(f"Message {message.id} sent in match {match.id} by {sender.id}")

        await self.notification_service.broadcast_message(message)
        self.analytics_service.track_message(message)
        return message

    async def list_messages(
        self,
        db: AsyncSession,
        match_id: UUID,
        user: User,
        limit: int = 50,
        before: Optional[datetime] = None
    ) -> Tuple[list[Message], bool]:
        """
        Get a page of match messages, oldest first.

        Returns:
            Tuple of (messages, has_more)
        """
        await self.match_service.get_match(db, match_id, user)
        # Fetch one extra row to learn whether an older page exists
        rows = await self.message_repo.list_for_match(db, match_id, limit=limit + 1, before=before)
        has_more = len(rows) > limit
        if has_more:
            rows = rows[1:]
        return rows, has_more
