from sqlalchemy import Column, DateTime, ForeignKey, Enum, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from swipematch.core.database import Base
from swipematch.utils.timeutils import utcnow


class SwipeTargetType(str, enum.Enum):
    JOB = "job"
    CANDIDATE = "candidate"


class SwipeDirection(str, enum.Enum):
    LEFT = "left"
    RIGHT = "right"


class Swipe(Base):
    """
    Append-only swipe ledger entry.

    ``target_id`` is a job id when ``target_type`` is JOB and a candidate
    *profile* id when it is CANDIDATE, so it carries no foreign key.
    """
    __tablename__ = "swipes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    actor_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    target_type = Column(Enum(SwipeTargetType), nullable=False)
    target_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    direction = Column(Enum(SwipeDirection), nullable=False)

    # Python-side default keeps sub-second precision for the reciprocity tie-break
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    actor = relationship("User")

    __table_args__ = (
        # One swipe per actor-target pair; the second writer gets an IntegrityError
        UniqueConstraint("actor_user_id", "target_type", "target_id", name="uq_swipe_actor_target"),
        Index("ix_swipes_target_direction", "target_type", "target_id", "direction"),
        Index("ix_swipes_actor_direction_created", "actor_user_id", "direction", "created_at"),
    )

    def __repr__(self):
        return (
            f"<Swipe(actor_user_id={self.actor_user_id}, target={self.target_type}:{self.target_id}, "
            f"direction={self.direction})>"
        )
