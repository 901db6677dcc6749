"""
Job lookups consumed by the matching engine.

Jobs are owned by job management; the engine only resolves a job to its
recruiter and enumerates a recruiter's open jobs.
"""

from __future__ import annotations
from uuid import UUID
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from swipematch.models.job import Job, JobStatus
from .base import BaseRepository

logger = logging.getLogger(__name__)


class JobRepository(BaseRepository[Job]):
    """Read-side repository for Job rows."""

    def __init__(self):
        super().__init__(Job)

    async def list_open_for_recruiter(
        self,
        db: AsyncSession,
        recruiter_id: UUID
    ) -> list[Job]:
        """
        Get all open jobs owned by a recruiter.

        Args:
            db: Active database session
            recruiter_id: UUID of the recruiter user

        Returns:
            List of open jobs (possibly empty)
        """
        try:
            stmt = select(Job).where(
                and_(
                    Job.recruiter_id == recruiter_id,
                    Job.status == JobStatus.OPEN,
                )
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing open jobs for recruiter {recruiter_id}: {e}")
            raise
