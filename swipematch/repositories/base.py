"""
Base repository implementing common persistence operations using SQLAlchemy 2.0.

Repositories are the persistence boundary of the matching engine: services
never build SQL themselves, and uniqueness guarantees (one swipe per
actor/target, one match per candidate/job) are enforced here by the
database's unique constraints and surfaced as ``IntegrityError``.
"""

from __future__ import annotations
from typing import Generic, TypeVar, Type, Optional
from uuid import UUID
from sqlalchemy import select, func, delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

logger = logging.getLogger(__name__)

# Generic type variable for the model
T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Generic base repository for the matching models.

    Type Parameters:
        T: The SQLAlchemy model type this repository manages

    Example:
        class MatchRepository(BaseRepository[Match]):
            def __init__(self):
                super().__init__(Match)
    """

    def __init__(self, model: Type[T]):
        self.model = model

    async def get(
        self,
        db: AsyncSession,
        id: UUID
    ) -> Optional[T]:
        """
        Retrieve a single record by ID.

        Args:
            db: Active database session
            id: UUID of the record to retrieve

        Returns:
            Model instance if found, None otherwise
        """
        try:
            stmt = select(self.model).where(self.model.id == id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {self.model.__name__} by id {id}: {e}")
            raise

    async def create(
        self,
        db: AsyncSession,
        obj_in: dict
    ) -> T:
        """
        Insert a new record and flush it so constraint violations surface now.

        Args:
            db: Active database session
            obj_in: Dictionary of field values for the new record

        Returns:
            Created model instance

        Raises:
            IntegrityError: If a unique constraint is violated. Only the
                SAVEPOINT around the insert is rolled back, so instances
                already loaded in the session stay usable (e.g. to fetch
                the row that won the race and serialise the caller's swipe).

        Example:
            swipe = await repo.create(db, {"actor_user_id": user_id, ...})
            await db.commit()
        """
        try:
            db_obj = self.model(**obj_in)
            async with db.begin_nested():
                db.add(db_obj)
                await db.flush()
            await db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            logger.warning(f"Integrity error creating {self.model.__name__}: {e}")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}")
            await db.rollback()
            raise

    async def delete(
        self,
        db: AsyncSession,
        id: UUID
    ) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if deleted, False if not found
        """
        try:
            stmt = sql_delete(self.model).where(self.model.id == id)
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model.__name__} with id {id}: {e}")
            await db.rollback()
            raise

    async def count(self, db: AsyncSession, *criteria) -> int:
        """Count rows matching the given WHERE criteria."""
        try:
            stmt = select(func.count()).select_from(self.model)
            if criteria:
                stmt = stmt.where(*criteria)
            result = await db.execute(stmt)
            return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting {self.model.__name__}: {e}")
            raise
