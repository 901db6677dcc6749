from sqlalchemy import Column, DateTime, ForeignKey, Text, Index
from sqlalchemy.dialects.postgresql import UUID
import uuid
from swipematch.core.database import Base
from swipematch.utils.timeutils import utcnow


class Message(Base):
    __tablename__ = "messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    # Messages outlive an unmatch; no FK so deleting the match keeps the history
    match_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    sender_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    body = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_messages_match_created", "match_id", "created_at"),
    )

    def __repr__(self):
        return f"<Message(id={self.id}, match_id={self.match_id}, sender_id={self.sender_id})>"
