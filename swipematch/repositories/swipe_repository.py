"""
Swipe repository: the persistence side of the swipe ledger.

Provides the uniqueness pre-check used before insert, the reciprocity
lookups (a specific right-swipe, or all right-swipes across a set of
targets), and the history/stats queries for the swipe endpoints.
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID
from sqlalchemy import select, and_, desc, func, case
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from swipematch.models.swipe import Swipe, SwipeDirection, SwipeTargetType
from .base import BaseRepository

logger = logging.getLogger(__name__)


class SwipeRepository(BaseRepository[Swipe]):
    """Repository for Swipe rows. Swipes are never updated or deleted."""

    def __init__(self):
        super().__init__(Swipe)

    async def find_by_actor_target(
        self,
        db: AsyncSession,
        actor_user_id: UUID,
        target_type: SwipeTargetType,
        target_id: UUID
    ) -> Optional[Swipe]:
        """
        Get the actor's swipe on a target, whatever its direction.

        Args:
            db: Active database session
            actor_user_id: UUID of the swiping user
            target_type: JOB or CANDIDATE
            target_id: Job id or candidate profile id

        Returns:
            Existing swipe if any, None otherwise
        """
        try:
            stmt = select(Swipe).where(
                and_(
                    Swipe.actor_user_id == actor_user_id,
                    Swipe.target_type == target_type,
                    Swipe.target_id == target_id,
                )
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching swipe by {actor_user_id} on {target_type}:{target_id}: {e}")
            raise

    async def find_right_swipe(
        self,
        db: AsyncSession,
        actor_user_id: UUID,
        target_type: SwipeTargetType,
        target_id: UUID
    ) -> Optional[Swipe]:
        """Get the actor's RIGHT swipe on a target, if it exists."""
        swipe = await self.find_by_actor_target(db, actor_user_id, target_type, target_id)
        if swipe is not None and swipe.direction == SwipeDirection.RIGHT:
            return swipe
        return None

    async def list_right_swipes_on_targets(
        self,
        db: AsyncSession,
        actor_user_id: UUID,
        target_type: SwipeTargetType,
        target_ids: Iterable[UUID]
    ) -> list[Swipe]:
        """
        Get all RIGHT swipes by an actor on any of the given targets.

        Order is unspecified; callers that need "most recent" must sort.

        Example:
            swipes = await repo.list_right_swipes_on_targets(
                db, candidate_user_id, SwipeTargetType.JOB, open_job_ids
            )
        """
        target_ids = list(target_ids)
        if not target_ids:
            return []
        try:
            stmt = select(Swipe).where(
                and_(
                    Swipe.actor_user_id == actor_user_id,
                    Swipe.target_type == target_type,
                    Swipe.target_id.in_(target_ids),
                    Swipe.direction == SwipeDirection.RIGHT,
                )
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching right swipes for {actor_user_id}: {e}")
            raise

    async def list_for_actor(
        self,
        db: AsyncSession,
        actor_user_id: UUID,
        skip: int = 0,
        limit: int = 20,
        target_type: Optional[SwipeTargetType] = None
    ) -> tuple[list[Swipe], int]:
        """
        Get an actor's swipe history, newest first.

        Returns:
            Tuple of (swipes, total count)
        """
        try:
            criteria = [Swipe.actor_user_id == actor_user_id]
            if target_type is not None:
                criteria.append(Swipe.target_type == target_type)

            stmt = (
                select(Swipe)
                .where(and_(*criteria))
                .order_by(desc(Swipe.created_at), desc(Swipe.id))
                .offset(skip)
                .limit(limit)
            )
            result = await db.execute(stmt)
            items = list(result.scalars().all())
            total = await self.count(db, *criteria)
            return items, total
        except SQLAlchemyError as e:
            logger.error(f"Error fetching swipe history for {actor_user_id}: {e}")
            raise

    async def get_stats(
        self,
        db: AsyncSession,
        actor_user_id: UUID,
        since: datetime
    ) -> dict:
        """
        Count an actor's swipes: total, since a cutoff, and per direction.

        Returns:
            Dictionary with total, today, right, left
        """
        try:
            stmt = select(
                func.count(Swipe.id),
                func.coalesce(func.sum(case((Swipe.created_at >= since, 1), else_=0)), 0),
                func.coalesce(func.sum(case((Swipe.direction == SwipeDirection.RIGHT, 1), else_=0)), 0),
                func.coalesce(func.sum(case((Swipe.direction == SwipeDirection.LEFT, 1), else_=0)), 0),
            ).where(Swipe.actor_user_id == actor_user_id)
            total, today, right, left = (await db.execute(stmt)).one()
            return {
                "total": int(total or 0),
                "today": int(today or 0),
                "right": int(right or 0),
                "left": int(left or 0),
            }
        except SQLAlchemyError as e:
            logger.error(f"Error computing swipe stats for {actor_user_id}: {e}")
            raise
