from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from swipematch.models.candidate_profile import CandidateProfile
from .base import BaseRepository

logger = logging.getLogger(__name__)


class CandidateProfileRepository(BaseRepository[CandidateProfile]):
    """
    Read-side repository for candidate profiles.

    Bridges the two identifier spaces: recruiters swipe on profile ids,
    candidates are identified by user ids everywhere else.
    """

    def __init__(self):
        super().__init__(CandidateProfile)

    async def get_by_user(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> Optional[CandidateProfile]:
        """Get the profile owned by a candidate user."""
        try:
            stmt = select(CandidateProfile).where(CandidateProfile.user_id == user_id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching candidate profile for user {user_id}: {e}")
            raise

    async def list_recently_active(
        self,
        db: AsyncSession,
        exclude_user_ids: Optional[set[UUID]] = None,
        location: Optional[str] = None,
        min_yoe: Optional[int] = None,
        max_yoe: Optional[int] = None,
        offset: int = 0,
        limit: int = 500
    ) -> list[CandidateProfile]:
        """
        Get one page of candidate profiles ordered by last activity, newest first.

        Location (case-insensitive substring) and experience bounds are
        applied in SQL; skills live in a JSON column and are left to the
        caller.

        Args:
            db: Active database session
            exclude_user_ids: Candidate user ids to leave out
            location: Substring the profile location must contain
            min_yoe: Inclusive lower bound on years of experience
            max_yoe: Inclusive upper bound on years of experience
            offset: Profiles to skip
            limit: Page size

        Returns:
            List of profiles
        """
        try:
            stmt = select(CandidateProfile)
            if exclude_user_ids:
                stmt = stmt.where(CandidateProfile.user_id.notin_(exclude_user_ids))
            if location and location.strip():
                stmt = stmt.where(CandidateProfile.location.icontains(location.strip(), autoescape=True))
            if min_yoe is not None:
                stmt = stmt.where(CandidateProfile.yoe >= min_yoe)
            if max_yoe is not None:
                stmt = stmt.where(CandidateProfile.yoe <= max_yoe)
            stmt = (
                stmt.order_by(desc(CandidateProfile.last_active), CandidateProfile.id)
                .offset(offset)
                .limit(limit)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing candidate profiles: {e}")
            raise
