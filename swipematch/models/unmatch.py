from sqlalchemy import Column, DateTime, ForeignKey, Integer, Index
from sqlalchemy.dialects.postgresql import UUID
import uuid
from swipematch.core.database import Base
from swipematch.utils.timeutils import utcnow


class UnmatchRecord(Base):
    """
    History of unmatches. ``cooldown_days`` is copied from the recruiter's
    setting at unmatch time; later setting changes never touch old rows.
    """
    __tablename__ = "unmatch_records"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    candidate_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    recruiter_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    cooldown_days = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_unmatch_pair_created", "candidate_user_id", "recruiter_user_id", "created_at"),
    )

    def __repr__(self):
        return (
            f"<UnmatchRecord(candidate_user_id={self.candidate_user_id}, "
            f"recruiter_user_id={self.recruiter_user_id}, cooldown_days={self.cooldown_days})>"
        )
