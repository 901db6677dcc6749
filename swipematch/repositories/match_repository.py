"""
Match repository.

The unique constraint on (candidate_user_id, job_id) is the only thing that
prevents duplicate matches when both parties swipe at the same moment;
``get_by_candidate_job`` is what the service uses to recover the winning
row after losing that race.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional
from uuid import UUID
from sqlalchemy import select, and_, desc, func, case
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from swipematch.models.match import Match
from swipematch.models.user import UserRole
from .base import BaseRepository

logger = logging.getLogger(__name__)


def _party_column(role: UserRole):
    """Column that identifies the requester's side of the match."""
    if role == UserRole.CANDIDATE:
        return Match.candidate_user_id
    return Match.recruiter_user_id


class MatchRepository(BaseRepository[Match]):
    """Repository for Match rows."""

    def __init__(self):
        super().__init__(Match)

    async def get_by_candidate_job(
        self,
        db: AsyncSession,
        candidate_user_id: UUID,
        job_id: UUID
    ) -> Optional[Match]:
        """
        Get the match for a candidate/job pair.

        Args:
            db: Active database session
            candidate_user_id: UUID of the candidate user
            job_id: UUID of the job

        Returns:
            Match if one exists, None otherwise
        """
        try:
            stmt = select(Match).where(
                and_(
                    Match.candidate_user_id == candidate_user_id,
                    Match.job_id == job_id,
                )
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching match for candidate {candidate_user_id} job {job_id}: {e}")
            raise

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        role: UserRole,
        skip: int = 0,
        limit: int = 20
    ) -> tuple[list[Match], int]:
        """
        Get a user's matches newest first, filtered on the side given by role.

        Returns:
            Tuple of (matches, total count)
        """
        column = _party_column(role)
        try:
            stmt = (
                select(Match)
                .where(column == user_id)
                .order_by(desc(Match.created_at), desc(Match.id))
                .offset(skip)
                .limit(limit)
            )
            result = await db.execute(stmt)
            items = list(result.scalars().all())
            total = await self.count(db, column == user_id)
            return items, total
        except SQLAlchemyError as e:
            logger.error(f"Error listing matches for {role.value} {user_id}: {e}")
            raise

    async def matched_candidate_ids(
        self,
        db: AsyncSession,
        recruiter_user_id: UUID
    ) -> set[UUID]:
        """Candidate user ids currently matched with a recruiter on any job."""
        try:
            stmt = select(Match.candidate_user_id).where(Match.recruiter_user_id == recruiter_user_id)
            result = await db.execute(stmt)
            return set(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching matched candidates for recruiter {recruiter_user_id}: {e}")
            raise

    async def get_stats(
        self,
        db: AsyncSession,
        user_id: UUID,
        role: UserRole,
        today: datetime,
        week_ago: datetime
    ) -> dict:
        """Count matches: total, since today's midnight, and in the last 7 days."""
        column = _party_column(role)
        try:
            stmt = select(
                func.count(Match.id),
                func.coalesce(func.sum(case((Match.created_at >= today, 1), else_=0)), 0),
                func.coalesce(func.sum(case((Match.created_at >= week_ago, 1), else_=0)), 0),
            ).where(column == user_id)
            total, today_count, week_count = (await db.execute(stmt)).one()
            return {
                "total": int(total or 0),
                "today": int(today_count or 0),
                "this_week": int(week_count or 0),
            }
        except SQLAlchemyError as e:
            logger.error(f"Error computing match stats for {user_id}: {e}")
            raise
