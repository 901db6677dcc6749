from sqlalchemy import Column, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from swipematch.core.database import Base
from swipematch.utils.timeutils import utcnow


class Match(Base):
    __tablename__ = "matches"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    candidate_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    recruiter_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    candidate = relationship("User", foreign_keys=[candidate_user_id])
    recruiter = relationship("User", foreign_keys=[recruiter_user_id])
    job = relationship("Job")

    __table_args__ = (
        # Sole guard against duplicate matches under concurrent mutual swipes
        UniqueConstraint("candidate_user_id", "job_id", name="uq_match_candidate_job"),
        Index("ix_matches_candidate_created", "candidate_user_id", "created_at"),
        Index("ix_matches_recruiter_created", "recruiter_user_id", "created_at"),
    )

    def involves(self, user_id) -> bool:
        return user_id in (self.candidate_user_id, self.recruiter_user_id)

    def other_party(self, user_id):
        return self.recruiter_user_id if user_id == self.candidate_user_id else self.candidate_user_id

    def __repr__(self):
        return (
            f"<Match(id={self.id}, candidate_user_id={self.candidate_user_id}, "
            f"recruiter_user_id={self.recruiter_user_id}, job_id={self.job_id})>"
        )
