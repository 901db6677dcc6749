"""
API endpoints for match chat.

Sending over HTTP and over the WebSocket share MessageService, so both
paths persist first and then broadcast to the match group.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import datetime
import uuid

from swipematch.core.database import get_db
from swipematch.api.deps import get_current_user
from swipematch.models.user import User
from swipematch.services.message_service import MessageService
from swipematch.services.rate_limit_service import RateLimitService
from swipematch.schemas.message import Message as MessageSchema, MessageCreate, MessageListResponse

router = APIRouter()


@router.get("", response_model=MessageListResponse)
async def list_messages(
    match_id: uuid.UUID = Query(..., description="Match to read"),
    limit: int = Query(50, ge=1, le=100),
    before: Optional[datetime] = Query(None, description="Only messages older than this"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get match messages oldest first; ``has_more`` signals an older page."""
    service = MessageService()
    messages, has_more = await service.list_messages(db, match_id, current_user, limit=limit, before=before)
    return MessageListResponse(
        messages=[MessageSchema.model_validate(m) for m in messages],
        has_more=has_more,
    )


@router.post("", response_model=MessageSchema, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await RateLimitService().enforce_message_limit(current_user.id)
    service = MessageService()
    return await service.send_message(db, payload.match_id, current_user, payload.body)
