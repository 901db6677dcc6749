"""
Recruiter discovery feed.

Lists candidate profiles a recruiter can swipe on: recently active first,
filtered by skills, location and experience, minus candidates already
matched with the recruiter and candidates still in an unmatch cooldown.
Filters the request leaves out come from the recruiter's saved filters.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from swipematch.core.config import settings
from swipematch.core.exceptions import Forbidden
from swipematch.models.candidate_profile import CandidateProfile
from swipematch.models.user import User, UserRole
from swipematch.repositories.candidate_profile_repository import CandidateProfileRepository
from swipematch.repositories.feed_filter_repository import FeedFilterRepository
from swipematch.repositories.match_repository import MatchRepository
from swipematch.schemas.candidate import CandidateFeedItem, FeedFilters, SavedFeedFilters
from swipematch.services.cooldown_service import CooldownService

logger = logging.getLogger(__name__)


def _normalise(values) -> set[str]:
    return {str(v).strip().lower() for v in (values or []) if str(v).strip()}


def _matched_skills(wanted: set[str], have: set[str]) -> set[str]:
    # "post" matches "postgresql"
    return {w for w in wanted if any(w in h for h in have)}


def skill_overlap(profile: CandidateProfile, wanted: list[str]) -> float:
    """Share of the requested skills the candidate lists, 0-100."""
    wanted_set = _normalise(wanted)
    if not wanted_set:
        return 0.0
    matched = _matched_skills(wanted_set, _normalise(profile.skills))
    return round(100.0 * len(matched) / len(wanted_set), 1)


def matches_filters(profile: CandidateProfile, filters: FeedFilters) -> bool:
    if filters.skills and not _matched_skills(_normalise(filters.skills), _normalise(profile.skills)):
        return False
    if filters.location and filters.location.strip().lower() not in (profile.location or "").lower():
        return False
    yoe = profile.yoe or 0
    if filters.min_yoe is not None and yoe < filters.min_yoe:
        return False
    if filters.max_yoe is not None and yoe > filters.max_yoe:
        return False
    return True


def merge_filters(requested: FeedFilters, saved: FeedFilters) -> FeedFilters:
    """Per-field merge: whatever the request sets wins, the rest comes from ``saved``."""
    return FeedFilters(
        skills=requested.skills or saved.skills,
        location=requested.location or saved.location,
        min_yoe=requested.min_yoe if requested.min_yoe is not None else saved.min_yoe,
        max_yoe=requested.max_yoe if requested.max_yoe is not None else saved.max_yoe,
    )


def _feed_item(profile: CandidateProfile, filters: FeedFilters) -> CandidateFeedItem:
    return CandidateFeedItem(
        profile_id=profile.id,
        user_id=profile.user_id,
        title=profile.title,
        skills=list(profile.skills or []),
        location=profile.location or "",
        yoe=profile.yoe or 0,
        about=profile.about,
        avatar_url=profile.avatar_url,
        score=skill_overlap(profile, filters.skills),
    )


class DiscoveryService:
    """Service building the recruiter's candidate feed and storing its saved filters."""

    # Page size of the profile scan
    SCAN_LIMIT = 500

    def __init__(
        self,
        profile_repo: Optional[CandidateProfileRepository] = None,
        match_repo: Optional[MatchRepository] = None,
        cooldown_service: Optional[CooldownService] = None,
        filter_repo: Optional[FeedFilterRepository] = None
    ):
        self.profile_repo = profile_repo or CandidateProfileRepository()
        self.match_repo = match_repo or MatchRepository()
        self.cooldown_service = cooldown_service or CooldownService()
        self.filter_repo = filter_repo or FeedFilterRepository()

    async def get_saved_filters(self, db: AsyncSession, recruiter: User) -> SavedFeedFilters:
        """The recruiter's stored filters, or empty filters if none were saved."""
        self._require_recruiter(recruiter)
        preset = await self.filter_repo.get_for_user(db, recruiter.id)
        if preset is None:
            return SavedFeedFilters(filters=FeedFilters())
        return SavedFeedFilters(
            filters=FeedFilters.model_validate(preset.filters or {}),
            updated_at=preset.updated_at,
        )

    async def save_filters(
        self,
        db: AsyncSession,
        recruiter: User,
        filters: FeedFilters
    ) -> SavedFeedFilters:
        """
        Replace the recruiter's stored filters.

        Fields left empty are stored empty, so saving ``{}`` clears them.
        """
        self._require_recruiter(recruiter)
        preset = await self.filter_repo.save_for_user(db, recruiter.id, filters.model_dump())
        await db.commit()
        logger.info(f"Saved feed filters for recruiter {recruiter.id}")
        return SavedFeedFilters(
            filters=FeedFilters.model_validate(preset.filters or {}),
            updated_at=preset.updated_at,
        )

    async def get_feed(
        self,
        db: AsyncSession,
        recruiter: User,
        filters: FeedFilters,
        now: Optional[datetime] = None
    ) -> list[CandidateFeedItem]:
        """
        Build the recruiter's candidate feed.

        Args:
            db: Active database session
            recruiter: Requesting recruiter
            filters: Request filters; empty fields fall back to the
                recruiter's saved filters
            now: Evaluation time for cooldowns (defaults to current UTC time)

        Returns:
            Up to ``feed_max_results`` items. With a skills filter, ordered
            by skill overlap, otherwise by last activity.

        Raises:
            Forbidden: If the user is not a recruiter
        """
        self._require_recruiter(recruiter)

        saved = await self.get_saved_filters(db, recruiter)
        filters = merge_filters(filters, saved.filters)

        matched = await self.match_repo.matched_candidate_ids(db, recruiter.id)
        cooling = await self.cooldown_service.candidates_under_cooldown(db, recruiter.id, now)
        excluded = matched | cooling

        items: list[CandidateFeedItem] = []
        offset = 0
        while True:
            page = await self.profile_repo.list_recently_active(
                db,
                exclude_user_ids=excluded,
                location=filters.location,
                min_yoe=filters.min_yoe,
                max_yoe=filters.max_yoe,
                offset=offset,
                limit=self.SCAN_LIMIT,
            )
            items.extend(_feed_item(profile, filters) for profile in page if matches_filters(profile, filters))
            if len(page) < self.SCAN_LIMIT:
                break
            # Ranking by skills needs every candidate; activity order can stop early
            if not filters.skills and len(items) >= settings.feed_max_results:
                break
            offset += self.SCAN_LIMIT

        if filters.skills:
            # sorted() is stable, so equal scores keep last-active order
            items = sorted(items, key=lambda item: item.score, reverse=True)

        logger.debug(
            f"Feed for recruiter {recruiter.id}: {len(items)} candidates "
            f"({len(matched)} matched, {len(cooling)} cooling down excluded)"
        )
        return items[:settings.feed_max_results]

    @staticmethod
    def _require_recruiter(user: User) -> None:
        if user.role != UserRole.RECRUITER:
            raise Forbidden("Only recruiters can browse candidates")
