from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy import select, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from swipematch.models.unmatch import UnmatchRecord
from .base import BaseRepository

logger = logging.getLogger(__name__)


class UnmatchRepository(BaseRepository[UnmatchRecord]):
    """Append-only history of unmatches, read by the cooldown check."""

    def __init__(self):
        super().__init__(UnmatchRecord)

    async def get_latest_for_pair(
        self,
        db: AsyncSession,
        candidate_user_id: UUID,
        recruiter_user_id: UUID
    ) -> Optional[UnmatchRecord]:
        """Most recent unmatch between a candidate and a recruiter."""
        try:
            stmt = (
                select(UnmatchRecord)
                .where(
                    and_(
                        UnmatchRecord.candidate_user_id == candidate_user_id,
                        UnmatchRecord.recruiter_user_id == recruiter_user_id,
                    )
                )
                .order_by(desc(UnmatchRecord.created_at))
                .limit(1)
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(
                f"Error fetching unmatch record for candidate {candidate_user_id} "
                f"recruiter {recruiter_user_id}: {e}"
            )
            raise

    async def list_for_recruiter(
        self,
        db: AsyncSession,
        recruiter_user_id: UUID
    ) -> list[UnmatchRecord]:
        """All unmatches a recruiter took part in, newest first."""
        try:
            stmt = (
                select(UnmatchRecord)
                .where(UnmatchRecord.recruiter_user_id == recruiter_user_id)
                .order_by(desc(UnmatchRecord.created_at))
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing unmatch records for recruiter {recruiter_user_id}: {e}")
            raise
