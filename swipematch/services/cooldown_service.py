"""
Unmatch cooldown ledger.

After an unmatch the candidate is hidden from that recruiter's discovery
feed for the cooldown captured on the unmatch record. The check is a
read-time comparison against the record's timestamp; nothing expires in the
background.
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Iterable, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from swipematch.core.config import settings
from swipematch.core.exceptions import Forbidden, InvalidCooldown
from swipematch.models.unmatch import UnmatchRecord
from swipematch.models.user import User, UserRole
from swipematch.repositories.unmatch_repository import UnmatchRepository
from swipematch.repositories.user_repository import UserRepository
from swipematch.utils.timeutils import ensure_aware, utcnow

logger = logging.getLogger(__name__)


def cooldown_active(record: UnmatchRecord, now: datetime) -> bool:
    """
    True while ``now`` is strictly inside the record's cooldown window.

    Example:
        unmatched at T with 30 days → active at T+29d23h, expired at T+30d
    """
    elapsed = ensure_aware(now) - ensure_aware(record.created_at)
    return elapsed < timedelta(days=record.cooldown_days)


class CooldownService:
    """Service for recording unmatches and answering cooldown queries."""

    def __init__(
        self,
        unmatch_repo: Optional[UnmatchRepository] = None,
        user_repo: Optional[UserRepository] = None
    ):
        self.unmatch_repo = unmatch_repo or UnmatchRepository()
        self.user_repo = user_repo or UserRepository()

    async def is_under_cooldown(
        self,
        db: AsyncSession,
        candidate_user_id: UUID,
        recruiter_user_id: UUID,
        now: Optional[datetime] = None
    ) -> bool:
        """
        Check whether a candidate is hidden from a recruiter.

        Only the most recent unmatch for the pair counts.

        Args:
            db: Active database session
            candidate_user_id: UUID of the candidate user
            recruiter_user_id: UUID of the recruiter user
            now: Evaluation time (defaults to current UTC time)

        Returns:
            True if the latest unmatch is still within its cooldown
        """
        record = await self.unmatch_repo.get_latest_for_pair(db, candidate_user_id, recruiter_user_id)
        if record is None:
            return False
        return cooldown_active(record, now or utcnow())

    async def candidates_under_cooldown(
        self,
        db: AsyncSession,
        recruiter_user_id: UUID,
        now: Optional[datetime] = None
    ) -> set[UUID]:
        """Candidate user ids currently hidden from a recruiter's feed."""
        records = await self.unmatch_repo.list_for_recruiter(db, recruiter_user_id)
        return self.active_candidates(records, now or utcnow())

    @staticmethod
    def active_candidates(records: Iterable[UnmatchRecord], now: datetime) -> set[UUID]:
        latest: dict[UUID, UnmatchRecord] = {}
        for record in records:
            current = latest.get(record.candidate_user_id)
            if current is None or ensure_aware(record.created_at) > ensure_aware(current.created_at):
                latest[record.candidate_user_id] = record
        return {
            candidate_id
            for candidate_id, record in latest.items()
            if cooldown_active(record, now)
        }

    async def record_unmatch(
        self,
        db: AsyncSession,
        candidate_user_id: UUID,
        recruiter_user_id: UUID
    ) -> UnmatchRecord:
        """
        Append an unmatch record carrying the recruiter's current cooldown.

        The caller owns the transaction (the match delete and this insert
        commit together).
        """
        cooldown_days = await self.user_repo.get_cooldown_days(
            db, recruiter_user_id, settings.default_cooldown_days
        )
        record = await self.unmatch_repo.create(
            db,
            {
                "candidate_user_id": candidate_user_id,
                "recruiter_user_id": recruiter_user_id,
                "cooldown_days": cooldown_days,
            },
        )
        logger.info(
            f"Recorded unmatch candidate={candidate_user_id} recruiter={recruiter_user_id} "
            f"cooldown={cooldown_days}d"
        )
        return record

    def get_cooldown_days(self, user: User) -> int:
        if user.role != UserRole.RECRUITER:
            raise Forbidden("Only recruiters have a cooldown setting")
        return user.cooldown_days if user.cooldown_days is not None else settings.default_cooldown_days

    async def set_cooldown_days(
        self,
        db: AsyncSession,
        user: User,
        days: int
    ) -> int:
        """
        Update a recruiter's cooldown for future unmatches.

        Existing unmatch records keep the value they captured.

        Raises:
            Forbidden: If the user is not a recruiter
            InvalidCooldown: If days is outside 1-90
        """
        if user.role != UserRole.RECRUITER:
            raise Forbidden("Only recruiters can change the cooldown setting")
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidCooldown()
        if not settings.min_cooldown_days <= days <= settings.max_cooldown_days:
            raise InvalidCooldown(
                f"cooldown_days must be between {settings.min_cooldown_days} "
                f"and {settings.max_cooldown_days}"
            )

        await self.user_repo.set_cooldown_days(db, user, days)
        await db.commit()
        logger.info(f"Recruiter {user.id} set cooldown to {days} days")
        return days
