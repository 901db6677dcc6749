from pydantic import BaseModel, Field, field_validator
from typing import List
from datetime import datetime
import uuid


class MessageCreate(BaseModel):
    match_id: uuid.UUID
    body: str = Field(..., min_length=1, max_length=2000)

    @field_validator("body")
    @classmethod
    def strip_body(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message body is required")
        return v


class Message(BaseModel):
    id: uuid.UUID
    match_id: uuid.UUID
    sender_id: uuid.UUID
    body: str
    created_at: datetime

    class Config:
        from_attributes = True


class MessageListResponse(BaseModel):
    messages: List[Message]
    has_more: bool
