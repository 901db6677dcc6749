from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional, Union
from datetime import datetime
import uuid

from swipematch.models.swipe import SwipeDirection, SwipeTargetType
from swipematch.schemas.match import Match
from swipematch.utils.pagination import PaginationMeta


class JobTarget(BaseModel):
    """A candidate swiping on a job posting."""
    type: Literal["job"] = "job"
    id: uuid.UUID

    @property
    def target_type(self) -> SwipeTargetType:
        return SwipeTargetType.JOB


class CandidateTarget(BaseModel):
    """A recruiter swiping on a candidate profile (profile id, not user id)."""
    type: Literal["candidate"] = "candidate"
    id: uuid.UUID

    @property
    def target_type(self) -> SwipeTargetType:
        return SwipeTargetType.CANDIDATE


SwipeTarget = Annotated[Union[JobTarget, CandidateTarget], Field(discriminator="type")]


class SwipeCreate(BaseModel):
    target: SwipeTarget
    direction: SwipeDirection


class Swipe(BaseModel):
    id: uuid.UUID
    actor_user_id: uuid.UUID
    target_type: SwipeTargetType
    target_id: uuid.UUID
    direction: SwipeDirection
    created_at: datetime

    class Config:
        from_attributes = True


class SwipeResult(BaseModel):
    """Response of POST /swipes. ``match`` is only present on a mutual right-swipe."""
    swipe: Swipe
    match: Optional[Match] = None
    is_new_match: Optional[bool] = None


class SwipeHistoryResponse(BaseModel):
    items: List[Swipe]
    pagination: PaginationMeta


class SwipeStats(BaseModel):
    total: int
    today: int
    right: int
    left: int
    daily_limit: int
    remaining_today: int
