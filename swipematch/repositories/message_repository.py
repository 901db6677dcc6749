from __future__ import annotations
from datetime import datetime
from typing import Optional
from uuid import UUID
from sqlalchemy import select, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from swipematch.models.message import Message
from .base import BaseRepository

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):
    """Chat message store for a match."""

    def __init__(self):
        super().__init__(Message)

    async def list_for_match(
        self,
        db: AsyncSession,
        match_id: UUID,
        limit: int = 50,
        before: Optional[datetime] = None
    ) -> list[Message]:
        """
        Get the newest ``limit`` messages of a match (optionally older than
        ``before``), returned oldest first for display.
        """
        try:
            criteria = [Message.match_id == match_id]
            if before is not None:
                criteria.append(Message.created_at < before)
            stmt = (
                select(Message)
                .where(and_(*criteria))
                .order_by(desc(Message.created_at))
                .limit(limit)
            )
            result = await db.execute(stmt)
            messages = list(result.scalars().all())
            messages.reverse()
            return messages
        except SQLAlchemyError as e:
            logger.error(f"Error listing messages for match {match_id}: {e}")
            raise
