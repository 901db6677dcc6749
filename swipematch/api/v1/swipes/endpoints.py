"""
API endpoints for swiping.

- POST /swipes: record a swipe; a mutual right-swipe returns the match
- GET /swipes: the caller's swipe history
- GET /swipes/stats: counts and the remaining daily allowance
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from swipematch.core.database import get_db
from swipematch.api.deps import get_current_user
from swipematch.models.swipe import SwipeTargetType
from swipematch.models.user import User
from swipematch.services.rate_limit_service import RateLimitService
from swipematch.services.swipe_service import SwipeService
from swipematch.schemas.match import Match as MatchSchema
from swipematch.schemas.swipe import Swipe as SwipeSchema, SwipeCreate, SwipeResult, SwipeHistoryResponse, SwipeStats
from swipematch.utils.pagination import PaginationMeta, PaginationParams

router = APIRouter()


@router.post(
    "",
    response_model=SwipeResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_swipe(
    swipe_data: SwipeCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Swipe on a job (candidates) or a candidate profile (recruiters).

    Response carries ``match`` and ``is_new_match`` only when the swipe
    completed a mutual right-swipe.
    """
    await RateLimitService().enforce_swipe_limit(current_user.id)

    service = SwipeService()
    outcome = await service.swipe(
        db,
        current_user,
        swipe_data.target.target_type,
        swipe_data.target.id,
        swipe_data.direction,
    )

    swipe = SwipeSchema.model_validate(outcome.swipe)
    if outcome.match is None:
        return SwipeResult(swipe=swipe)
    return SwipeResult(
        swipe=swipe,
        match=MatchSchema.model_validate(outcome.match),
        is_new_match=outcome.is_new_match,
    )


@router.get("", response_model=SwipeHistoryResponse)
async def list_swipes(
    pagination: PaginationParams = Depends(PaginationParams.as_query),
    target_type: Optional[SwipeTargetType] = Query(None, description="Filter by target type"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the current user's swipe history, newest first."""
    service = SwipeService()
    items, total = await service.list_history(db, current_user, pagination, target_type)
    return SwipeHistoryResponse(
        items=[SwipeSchema.model_validate(s) for s in items],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.get("/stats", response_model=SwipeStats)
async def swipe_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Swipe counts (total, today, per direction) and remaining swipes today."""
    service = SwipeService()
    return await service.get_stats(db, current_user)
