from __future__ import annotations
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from swipematch.models.user import User
from .base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User rows (identity lookups and recruiter settings)."""

    def __init__(self):
        super().__init__(User)

    async def get_cooldown_days(self, db: AsyncSession, recruiter_user_id: UUID, default: int) -> int:
        """Current cooldown setting of a recruiter, or ``default`` if unknown."""
        try:
            stmt = select(User.cooldown_days).where(User.id == recruiter_user_id)
            result = await db.execute(stmt)
            value = result.scalar_one_or_none()
            return value if value is not None else default
        except SQLAlchemyError as e:
            logger.error(f"Error fetching cooldown for recruiter {recruiter_user_id}: {e}")
            raise

    async def set_cooldown_days(self, db: AsyncSession, user: User, days: int) -> User:
        try:
            user.cooldown_days = days
            await db.flush()
            return user
        except SQLAlchemyError as e:
            logger.error(f"Error updating cooldown for recruiter {user.id}: {e}")
            await db.rollback()
            raise
