from sqlalchemy import Column, Integer, String, DateTime, JSON, Text, Boolean, ForeignKey, Enum
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from swipematch.core.database import Base


class JobStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    recruiter_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False, index=True)
    location = Column(String(255))
    description = Column(Text)

    stack = Column(JSON)  # List of required skills/technologies
    min_yoe = Column(Integer, default=0)
    remote = Column(Boolean, default=False)

    status = Column(Enum(JobStatus), nullable=False, default=JobStatus.OPEN, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    recruiter = relationship("User", back_populates="jobs")

    @property
    def is_open(self) -> bool:
        return self.status == JobStatus.OPEN

    def __repr__(self):
        return f"<Job(id={self.id}, title={self.title}, recruiter_id={self.recruiter_id})>"
