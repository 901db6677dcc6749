from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional
import uuid


class FeedFilters(BaseModel):
    """Recruiter discovery-feed filters; all optional and AND-ed together."""
    skills: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    min_yoe: Optional[int] = Field(default=None, ge=0, le=50)
    max_yoe: Optional[int] = Field(default=None, ge=0, le=50)

    @field_validator("skills", mode="before")
    @classmethod
    def split_skills(cls, v):
        """Accept a comma-separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [s.strip() for s in v if s and s.strip()]


class CandidateFeedItem(BaseModel):
    profile_id: uuid.UUID
    user_id: uuid.UUID
    title: str
    skills: List[str]
    location: str
    yoe: int
    about: Optional[str] = None
    avatar_url: Optional[str] = None
    score: float


class CandidateFeedResponse(BaseModel):
    candidates: List[CandidateFeedItem]


class SavedFeedFilters(BaseModel):
    """A recruiter's stored feed filters; empty until first saved."""
    filters: FeedFilters
    updated_at: Optional[datetime] = None
