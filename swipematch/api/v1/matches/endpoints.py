"""
API endpoints for matches.

Both parties can list, read and unmatch; nobody else can see a match.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from swipematch.core.database import get_db
from swipematch.api.deps import get_current_user
from swipematch.models.user import User
from swipematch.services.match_service import MatchService
from swipematch.schemas.match import Match as MatchSchema, MatchListResponse, MatchStats
from swipematch.utils.pagination import PaginationMeta, PaginationParams

router = APIRouter()


@router.get("", response_model=MatchListResponse)
async def list_matches(
    pagination: PaginationParams = Depends(PaginationParams.as_query),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the current user's matches, newest first."""
    service = MatchService()
    items, total = await service.list_matches(db, current_user, pagination)
    return MatchListResponse(
        items=[MatchSchema.model_validate(m) for m in items],
        pagination=PaginationMeta.from_params(pagination, total),
    )


@router.get("/stats", response_model=MatchStats)
async def match_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = MatchService()
    return await service.get_match_stats(db, current_user)


@router.get("/{match_id}", response_model=MatchSchema)
async def get_match(
    match_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get a single match. 404 if missing, 403 if the caller is not a party."""
    service = MatchService()
    return await service.get_match(db, match_id, current_user)


@router.delete("/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_match(
    match_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Unmatch. The candidate is hidden from the recruiter's feed for the
    recruiter's current cooldown.
    """
    service = MatchService()
    await service.delete_match(db, match_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
