from pydantic import BaseModel
from typing import List
from datetime import datetime
import uuid

from swipematch.utils.pagination import PaginationMeta


class Match(BaseModel):
    id: uuid.UUID
    candidate_user_id: uuid.UUID
    recruiter_user_id: uuid.UUID
    job_id: uuid.UUID
    created_at: datetime

    class Config:
        from_attributes = True


class MatchListResponse(BaseModel):
    items: List[Match]
    pagination: PaginationMeta


class MatchStats(BaseModel):
    total: int
    today: int
    this_week: int
