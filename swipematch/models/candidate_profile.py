from sqlalchemy import Column, Integer, String, DateTime, JSON, Text, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from swipematch.core.database import Base
from swipematch.utils.timeutils import utcnow


class CandidateProfile(Base):
    """
    Candidate-facing profile. Owned by profile management; the matching
    engine only reads it to bridge profile ids (what recruiters swipe on)
    back to candidate user ids.
    """
    __tablename__ = "candidate_profiles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True, index=True)

    title = Column(String(255), nullable=False)
    skills = Column(JSON, nullable=False, default=list)
    yoe = Column(Integer, nullable=False, default=0)
    location = Column(String(255), nullable=False, default="")
    about = Column(Text)
    avatar_url = Column(String(500))

    last_active = Column(DateTime(timezone=True), default=utcnow, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="candidate_profile")

    def __repr__(self):
        return f"<CandidateProfile(id={self.id}, user_id={self.user_id})>"
