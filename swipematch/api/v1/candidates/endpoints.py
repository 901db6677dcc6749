"""
API endpoints for recruiter candidate discovery.

- GET /candidates/feed: candidates the recruiter can swipe on
- GET /candidates/filters: the recruiter's saved feed filters
- PUT /candidates/filters: replace the saved feed filters
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from swipematch.core.database import get_db
from swipematch.api.deps import get_recruiter
from swipematch.models.user import User
from swipematch.services.discovery_service import DiscoveryService
from swipematch.schemas.candidate import CandidateFeedResponse, FeedFilters, SavedFeedFilters

router = APIRouter()


@router.get("/feed", response_model=CandidateFeedResponse)
async def candidate_feed(
    skills: Optional[str] = Query(None, description="Comma-separated skills, any of which must match"),
    location: Optional[str] = Query(None),
    min_yoe: Optional[int] = Query(None, ge=0, le=50),
    max_yoe: Optional[int] = Query(None, ge=0, le=50),
    current_user: User = Depends(get_recruiter),
    db: AsyncSession = Depends(get_db)
):
    """
    Candidates the recruiter can swipe on.

    Excludes candidates already matched with the recruiter and candidates
    inside an unmatch cooldown. Filters not given here fall back to the
    recruiter's saved filters. At most 50 results.
    """
    filters = FeedFilters(skills=skills, location=location, min_yoe=min_yoe, max_yoe=max_yoe)
    service = DiscoveryService()
    candidates = await service.get_feed(db, current_user, filters)
    return CandidateFeedResponse(candidates=candidates)


@router.get("/filters", response_model=SavedFeedFilters)
async def get_feed_filters(
    current_user: User = Depends(get_recruiter),
    db: AsyncSession = Depends(get_db)
):
    """Get the recruiter's saved feed filters (empty if never saved)."""
    service = DiscoveryService()
    return await service.get_saved_filters(db, current_user)


@router.put("/filters", response_model=SavedFeedFilters)
async def save_feed_filters(
    filters: FeedFilters,
    current_user: User = Depends(get_recruiter),
    db: AsyncSession = Depends(get_db)
):
    """
    Replace the recruiter's saved feed filters.

    ``skills`` may be a list or a comma-separated string. Omitted fields
    are cleared.
    """
    service = DiscoveryService()
    return await service.save_filters(db, current_user, filters)
