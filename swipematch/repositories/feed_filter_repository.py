"""
Feed filter repository for recruiters' saved discovery filters.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from swipematch.models.feed_filter import FeedFilterPreset
from .base import BaseRepository

logger = logging.getLogger(__name__)


class FeedFilterRepository(BaseRepository[FeedFilterPreset]):
    """
    Repository for FeedFilterPreset model.

    Each recruiter has at most one row; saving replaces its filters.
    """

    def __init__(self):
        super().__init__(FeedFilterPreset)

    async def get_for_user(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> Optional[FeedFilterPreset]:
        """
        Get a recruiter's saved filters.

        Args:
            db: Active database session
            user_id: UUID of the recruiter

        Returns:
            FeedFilterPreset instance or None

        Example:
            preset = await repo.get_for_user(db, recruiter_id)
        """
        try:
            stmt = select(FeedFilterPreset).where(FeedFilterPreset.user_id == user_id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error fetching feed filters for user {user_id}: {e}")
            raise

    async def save_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        filters: dict
    ) -> FeedFilterPreset:
        """
        Insert or replace a recruiter's saved filters.

        Args:
            db: Active database session
            user_id: UUID of the recruiter
            filters: JSON-serialisable filter values

        Returns:
            The stored FeedFilterPreset
        """
        preset = await self.get_for_user(db, user_id)
        if preset is None:
            try:
                return await self.create(db, {"user_id": user_id, "filters": filters})
            except IntegrityError:
                # A concurrent save created the row first
                preset = await self.get_for_user(db, user_id)
                if preset is None:
                    raise

        try:
            preset.filters = filters
            await db.flush()
            return preset
        except SQLAlchemyError as e:
            logger.error(f"Error saving feed filters for user {user_id}: {e}")
            raise
