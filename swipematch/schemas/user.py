from pydantic import BaseModel, Field


class CooldownUpdate(BaseModel):
    """Recruiter cooldown for future unmatches, in days."""
    cooldown_days: int = Field(..., ge=1, le=90)


class CooldownSettings(BaseModel):
    cooldown_days: int
