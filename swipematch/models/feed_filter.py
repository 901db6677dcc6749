from sqlalchemy import Column, DateTime, JSON, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
import uuid
from swipematch.core.database import Base
from swipematch.utils.timeutils import utcnow


class FeedFilterPreset(Base):
    """
    A recruiter's saved discovery-feed filters, one row per recruiter.

    ``filters`` holds ``skills``, ``location``, ``min_yoe`` and ``max_yoe``;
    the feed falls back to these for any filter the request leaves out.
    """
    __tablename__ = "feed_filter_presets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True, index=True)
    filters = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<FeedFilterPreset(id={self.id}, user_id={self.user_id})>"
