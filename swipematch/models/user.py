from sqlalchemy import Column, Integer, String, DateTime, Boolean, Enum
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from swipematch.core.database import Base
from swipematch.core.config import settings


class UserRole(str, enum.Enum):
    CANDIDATE = "candidate"
    RECRUITER = "recruiter"


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(Enum(UserRole), nullable=False, index=True)
    full_name = Column(String(255))
    is_active = Column(Boolean, nullable=False, default=True)

    # Recruiter setting: cooldown applied to future unmatches (1-90 days)
    cooldown_days = Column(
        Integer,
        nullable=False,
        default=settings.default_cooldown_days,
        server_default=str(settings.default_cooldown_days),
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    candidate_profile = relationship("CandidateProfile", back_populates="user", uselist=False)
    jobs = relationship("Job", back_populates="recruiter")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
