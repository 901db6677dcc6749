"""
Reciprocity detection.

Decides whether a freshly recorded right-swipe completes a mutual interest:

- Candidate → job: the job's recruiter must have right-swiped the
  candidate's profile.
- Recruiter → candidate profile: the candidate must have right-swiped one
  of the recruiter's open jobs. When several qualify, the most recently
  swiped job wins (ties broken by the larger swipe id).

The detector only reads; creating the match is the match store's job.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from swipematch.models.swipe import Swipe, SwipeDirection, SwipeTargetType
from swipematch.repositories.candidate_profile_repository import CandidateProfileRepository
from swipematch.repositories.job_repository import JobRepository
from swipematch.repositories.swipe_repository import SwipeRepository
from swipematch.utils.timeutils import ensure_aware

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReciprocityResult:
    is_match: bool
    candidate_user_id: Optional[UUID] = None
    recruiter_user_id: Optional[UUID] = None
    job_id: Optional[UUID] = None


NO_MATCH = ReciprocityResult(is_match=False)


def most_recent_swipe(swipes: Iterable[Swipe]) -> Optional[Swipe]:
    """Latest swipe by created_at; equal timestamps fall back to the larger id."""
    ordered = sorted(
        swipes,
        key=lambda s: (ensure_aware(s.created_at), str(s.id)),
        reverse=True,
    )
    return ordered[0] if ordered else None


class ReciprocityService:
    """Service that resolves a right-swipe to a (candidate, recruiter, job) triple."""

    def __init__(
        self,
        swipe_repo: Optional[SwipeRepository] = None,
        job_repo: Optional[JobRepository] = None,
        profile_repo: Optional[CandidateProfileRepository] = None
    ):
        self.swipe_repo = swipe_repo or SwipeRepository()
        self.job_repo = job_repo or JobRepository()
        self.profile_repo = profile_repo or CandidateProfileRepository()

    async def check_and_resolve(self, db: AsyncSession, swipe: Swipe) -> ReciprocityResult:
        """
        Check whether ``swipe`` completes a mutual right-swipe.

        Args:
            db: Active database session
            swipe: The swipe that was just recorded

        Returns:
            ReciprocityResult; ``is_match`` is False for left swipes and
            whenever the counterpart swipe is missing.
        """
        if swipe.direction != SwipeDirection.RIGHT:
            return NO_MATCH

        if swipe.target_type == SwipeTargetType.JOB:
            return await self._resolve_candidate_swipe(db, swipe)
        if swipe.target_type == SwipeTargetType.CANDIDATE:
            return await self._resolve_recruiter_swipe(db, swipe)

        logger.warning(f"Unknown swipe target type {swipe.target_type} on swipe {swipe.id}")
        return NO_MATCH

    async def _resolve_candidate_swipe(self, db: AsyncSession, swipe: Swipe) -> ReciprocityResult:
        job = await self.job_repo.get(db, swipe.target_id)
        if job is None:
            logger.warning(f"Job {swipe.target_id} vanished before reciprocity check")
            return NO_MATCH

        profile = await self.profile_repo.get_by_user(db, swipe.actor_user_id)
        if profile is None:
            # Recruiters swipe on profiles, so without one there is nothing to reciprocate
            logger.info(f"Candidate {swipe.actor_user_id} has no profile, skipping reciprocity")
            return NO_MATCH

        counterpart = await self.swipe_repo.find_right_swipe(
            db, job.recruiter_id, SwipeTargetType.CANDIDATE, profile.id
        )
        if counterpart is None:
            return NO_MATCH

        return ReciprocityResult(
            is_match=True,
            candidate_user_id=swipe.actor_user_id,
            recruiter_user_id=job.recruiter_id,
            job_id=job.id,
        )

    async def _resolve_recruiter_swipe(self, db: AsyncSession, swipe: Swipe) -> ReciprocityResult:
        profile = await self.profile_repo.get(db, swipe.target_id)
        if profile is None:
            logger.warning(f"Candidate profile {swipe.target_id} vanished before reciprocity check")
            return NO_MATCH

        open_jobs = await self.job_repo.list_open_for_recruiter(db, swipe.actor_user_id)
        if not open_jobs:
            return NO_MATCH

        candidate_swipes = await self.swipe_repo.list_right_swipes_on_targets(
            db, profile.user_id, SwipeTargetType.JOB, [job.id for job in open_jobs]
        )
        chosen = most_recent_swipe(candidate_swipes)
        if chosen is None:
            return NO_MATCH

        return ReciprocityResult(
            is_match=True,
            candidate_user_id=profile.user_id,
            recruiter_user_id=swipe.actor_user_id,
            job_id=chosen.target_id,
        )
