from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from swipematch.core.database import get_db
from swipematch.api.deps import get_current_user
from swipematch.models.user import User
from swipematch.services.cooldown_service import CooldownService
from swipematch.schemas.user import CooldownSettings, CooldownUpdate

router = APIRouter()


@router.get("/cooldown", response_model=CooldownSettings)
async def get_cooldown(current_user: User = Depends(get_current_user)):
    """Current recruiter cooldown applied to future unmatches."""
    service = CooldownService()
    return CooldownSettings(cooldown_days=service.get_cooldown_days(current_user))


@router.put("/cooldown", response_model=CooldownSettings)
async def update_cooldown(
    payload: CooldownUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Set the recruiter cooldown (1-90 days). Existing unmatches keep their value."""
    service = CooldownService()
    days = await service.set_cooldown_days(db, current_user, payload.cooldown_days)
    return CooldownSettings(cooldown_days=days)
