"""
Swipe service: the swipe ledger and the swipe-to-match flow.

A swipe is validated against the actor's role, checked for uniqueness,
persisted and committed before reciprocity is evaluated, so a failure while
creating the match never loses the swipe itself.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import logging

from swipematch.core.config import settings
from swipematch.core.exceptions import (
    DuplicateSwipe,
    InvalidTargetForRole,
    TargetNotFound,
    TargetUnavailable,
)
from swipematch.models.match import Match
from swipematch.models.swipe import Swipe, SwipeDirection, SwipeTargetType
from swipematch.models.user import User, UserRole
from swipematch.repositories.candidate_profile_repository import CandidateProfileRepository
from swipematch.repositories.job_repository import JobRepository
from swipematch.repositories.swipe_repository import SwipeRepository
from swipematch.services.analytics_service import AnalyticsService
from swipematch.services.match_service import MatchService
from swipematch.services.reciprocity_service import ReciprocityService
from swipematch.utils.pagination import PaginationParams
from swipematch.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

# The only target type each role may swipe on
ALLOWED_TARGETS = {
    UserRole.CANDIDATE: SwipeTargetType.JOB,
    UserRole.RECRUITER: SwipeTargetType.CANDIDATE,
}


@dataclass
class SwipeOutcome:
    swipe: Swipe
    match: Optional[Match] = None
    is_new_match: bool = False


class SwipeService:
    """
    Service for recording swipes and running the match flow.

    This service coordinates:
    - Role/target validation and target existence checks
    - One-swipe-per-target enforcement
    - Reciprocity detection and match creation on right swipes
    - Swipe history and statistics
    """

    def __init__(
        self,
        swipe_repo: Optional[SwipeRepository] = None,
        job_repo: Optional[JobRepository] = None,
        profile_repo: Optional[CandidateProfileRepository] = None,
        reciprocity_service: Optional[ReciprocityService] = None,
        match_service: Optional[MatchService] = None,
        analytics_service: Optional[AnalyticsService] = None
    ):
        """
        Initialize service with repositories.

        Args:
            swipe_repo: SwipeRepository instance (creates new if None)
            job_repo: JobRepository instance
            profile_repo: CandidateProfileRepository instance
            reciprocity_service: ReciprocityService instance
            match_service: MatchService instance
            analytics_service: AnalyticsService instance
        """
        self.swipe_repo = swipe_repo or SwipeRepository()
        self.job_repo = job_repo or JobRepository()
        self.profile_repo = profile_repo or CandidateProfileRepository()
        self.reciprocity_service = reciprocity_service or ReciprocityService(
            swipe_repo=self.swipe_repo, job_repo=self.job_repo, profile_repo=self.profile_repo
        )
        self.match_service = match_service or MatchService()
        self.analytics_service = analytics_service or AnalyticsService()

    @staticmethod
    def check_target_for_role(role: UserRole, target_type: SwipeTargetType) -> None:
        """
        Raises:
            InvalidTargetForRole: If the role may not swipe on target_type
        """
        if ALLOWED_TARGETS.get(UserRole(role)) != target_type:
            raise InvalidTargetForRole(
                f"A {UserRole(role).value} cannot swipe on a {target_type.value}"
            )

    async def verify_target(
        self,
        db: AsyncSession,
        target_type: SwipeTargetType,
        target_id: UUID
    ) -> None:
        """
        Check that the swipe target exists (and, for jobs, is open).

        Raises:
            TargetNotFound: If the job or candidate profile does not exist
            TargetUnavailable: If the job is closed
        """
        if target_type == SwipeTargetType.JOB:
            job = await self.job_repo.get(db, target_id)
            if job is None:
                raise TargetNotFound("Job not found")
            if not job.is_open:
                raise TargetUnavailable()
        else:
            profile = await self.profile_repo.get(db, target_id)
            if profile is None:
                raise TargetNotFound("Candidate not found")

    async def record_swipe(
        self,
        db: AsyncSession,
        actor: User,
        target_type: SwipeTargetType,
        target_id: UUID,
        direction: SwipeDirection
    ) -> Swipe:
        """
        Validate and append a swipe to the ledger, then commit.

        Args:
            db: Active database session
            actor: Swiping user
            target_type: JOB or CANDIDATE
            target_id: Job id or candidate profile id
            direction: LEFT or RIGHT

        Returns:
            The persisted swipe

        Raises:
            InvalidTargetForRole, DuplicateSwipe, TargetNotFound, TargetUnavailable
        """
        self.check_target_for_role(actor.role, target_type)

        existing = await self.swipe_repo.find_by_actor_target(db, actor.id, target_type, target_id)
        if existing is not None:
            raise DuplicateSwipe()

        await self.verify_target(db, target_type, target_id)

        try:
            swipe = await self.swipe_repo.create(
                db,
                {
                    "actor_user_id": actor.id,
                    "target_type": target_type,
                    "target_id": target_id,
                    "direction": direction,
                },
            )
            await db.commit()
        except IntegrityError as e:
            # Concurrent duplicate slipped past the pre-check
            raise DuplicateSwipe() from e

        logger.info(
            f"Recorded {direction.value} swipe {swipe.id} by {actor.id} on {target_type.value}:{target_id}"
        )
        self.analytics_service.track_swipe(swipe)
        return swipe

    async def swipe(
        self,
        db: AsyncSession,
        actor: User,
        target_type: SwipeTargetType,
        target_id: UUID,
        direction: SwipeDirection
    ) -> SwipeOutcome:
        """
        Record a swipe and, on a right swipe, create the match it completes.

        Returns:
            SwipeOutcome; ``match`` is set only when the swipe completed a
            mutual right-swipe, and ``is_new_match`` is False when the match
            already existed.

        Example:
            outcome = await service.swipe(db, user, SwipeTargetType.JOB, job_id, SwipeDirection.RIGHT)
            if outcome.match:
                ...
        """
        swipe = await self.record_swipe(db, actor, target_type, target_id, direction)
        if direction != SwipeDirection.RIGHT:
            return SwipeOutcome(swipe=swipe)

        result = await self.reciprocity_service.check_and_resolve(db, swipe)
        if not result.is_match:
            return SwipeOutcome(swipe=swipe)

        match, created = await self.match_service.create_match(
            db, result.candidate_user_id, result.recruiter_user_id, result.job_id
        )
        return SwipeOutcome(swipe=swipe, match=match, is_new_match=created)

    async def list_history(
        self,
        db: AsyncSession,
        actor: User,
        pagination: PaginationParams,
        target_type: Optional[SwipeTargetType] = None
    ) -> Tuple[list[Swipe], int]:
        """Swipe history of the actor, newest first. Returns (items, total)."""
        return await self.swipe_repo.list_for_actor(
            db,
            actor.id,
            skip=pagination.get_offset(),
            limit=pagination.page_size,
            target_type=target_type,
        )

    async def get_stats(self, db: AsyncSession, actor: User) -> dict:
        """
        Swipe counts for the actor plus the remaining daily allowance.

        "today" is the UTC calendar day.
        """
        now = utcnow()
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        stats = await self.swipe_repo.get_stats(db, actor.id, midnight)
        stats["daily_limit"] = settings.swipe_daily_limit
        stats["remaining_today"] = max(0, settings.swipe_daily_limit - stats["today"])
        return stats
