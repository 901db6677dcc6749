"""
Match store service.

Creates matches idempotently per (candidate, job), serves match reads to
the two parties, and handles unmatching (delete + cooldown record).
"""

from __future__ import annotations
from datetime import timedelta
from typing import Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import logging

from swipematch.core.exceptions import Forbidden, MatchAlreadyExists, MatchNotFound
from swipematch.models.match import Match
from swipematch.models.user import User, UserRole
from swipematch.repositories.match_repository import MatchRepository
from swipematch.services.analytics_service import AnalyticsService
from swipematch.services.cooldown_service import CooldownService
from swipematch.services.notification_service import NotificationService
from swipematch.utils.pagination import PaginationParams
from swipematch.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class MatchService:
    """
    Service for managing matches.

    This service coordinates:
    - Idempotent match creation (one match per candidate/job)
    - Party-only reads of matches
    - Unmatching with a cooldown record
    - Notification and analytics side effects of a new match
    """

    def __init__(
        self,
        match_repo: Optional[MatchRepository] = None,
        cooldown_service: Optional[CooldownService] = None,
        notification_service: Optional[NotificationService] = None,
        analytics_service: Optional[AnalyticsService] = None
    ):
        self.match_repo = match_repo or MatchRepository()
        self.cooldown_service = cooldown_service or CooldownService()
        self.notification_service = notification_service or NotificationService()
        self.analytics_service = analytics_service or AnalyticsService()

    async def create_match(
        self,
        db: AsyncSession,
        candidate_user_id: UUID,
        recruiter_user_id: UUID,
        job_id: UUID
    ) -> Tuple[Match, bool]:
        """
        Get or create the match for a candidate/job pair.

        Side effects (notifications, analytics) fire only when this call
        created the row.

        Args:
            db: Active database session
            candidate_user_id: UUID of the candidate user
            recruiter_user_id: UUID of the job's recruiter
            job_id: UUID of the job

        Returns:
            Tuple of (match, created)

        Example:
            match, created = await service.create_match(db, cand_id, rec_id, job_id)
        """
        existing = await self.match_repo.get_by_candidate_job(db, candidate_user_id, job_id)
        if existing is not None:
            logger.info(f"Match already exists for candidate {candidate_user_id} job {job_id}")
            return existing, False

        try:
            match = await self._insert(db, candidate_user_id, recruiter_user_id, job_id)
        except MatchAlreadyExists:
            # Lost the race against the other party's concurrent swipe
            winner = await self.match_repo.get_by_candidate_job(db, candidate_user_id, job_id)
            if winner is None:
                raise
            logger.info(f"Concurrent match creation for candidate {candidate_user_id} job {job_id}, using {winner.id}")
            return winner, False

        logger.info(
            f"Created match {match.id}: candidate={candidate_user_id} "
            f"recruiter={recruiter_user_id} job={job_id}"
        )
        self.notification_service.notify_match(match)
        self.analytics_service.track_match(match)
        return match, True

    async def _insert(
        self,
        db: AsyncSession,
        candidate_user_id: UUID,
        recruiter_user_id: UUID,
        job_id: UUID
    ) -> Match:
        try:
            match = await self.match_repo.create(
                db,
                {
                    "candidate_user_id": candidate_user_id,
                    "recruiter_user_id": recruiter_user_id,
                    "job_id": job_id,
                },
            )
            await db.commit()
            return match
        except IntegrityError as e:
            raise MatchAlreadyExists() from e

    async def get_match(
        self,
        db: AsyncSession,
        match_id: UUID,
        user: User
    ) -> Match:
        """
        Get a match the user is a party to.

        Raises:
            MatchNotFound: If no match has this id
            Forbidden: If the user is neither the candidate nor the recruiter
        """
        match = await self.match_repo.get(db, match_id)
        if match is None:
            raise MatchNotFound()
        if not match.involves(user.id):
            raise Forbidden()
        return match

    async def list_matches(
        self,
        db: AsyncSession,
        user: User,
        pagination: PaginationParams
    ) -> Tuple[list[Match], int]:
        """List the user's matches newest first. Returns (items, total)."""
        return await self.match_repo.list_for_user(
            db,
            user.id,
            UserRole(user.role),
            skip=pagination.get_offset(),
            limit=pagination.page_size,
        )

    async def delete_match(
        self,
        db: AsyncSession,
        match_id: UUID,
        user: User
    ) -> None:
        """
        Unmatch: delete the match and record a cooldown for the pair.

        Either party may unmatch. The cooldown uses the recruiter's setting
        at this moment. Deleting the match does not touch swipes or
        messages. Live connections are evicted from the match's chat group.
        """
        match = await self.get_match(db, match_id, user)
        candidate_user_id = match.candidate_user_id
        recruiter_user_id = match.recruiter_user_id

        await self.match_repo.delete(db, match.id)
        await self.cooldown_service.record_unmatch(db, candidate_user_id, recruiter_user_id)
        await db.commit()

        self.notification_service.end_match(match_id)

        logger.info(f"Match {match_id} deleted by user {user.id}")

    async def get_match_stats(self, db: AsyncSession, user: User) -> dict:
        """Match counts for the user: total, today (UTC), last 7 days."""
        now = utcnow()
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return await self.match_repo.get_stats(
            db, user.id, UserRole(user.role), today, now - timedelta(days=7)
        )
