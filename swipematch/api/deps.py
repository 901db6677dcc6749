from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Callable
import structlog

from swipematch.core.database import get_db
from swipematch.core.security import verify_token
from swipematch.models.user import User, UserRole

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user whose role matches the token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    claims = verify_token(credentials.credentials, "access")
    if claims is None:
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == claims.user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise credentials_exception

    # A token minted for another role is stale (role changed) or forged
    if UserRole(user.role).value != claims.role:
        raise credentials_exception

    structlog.contextvars.bind_contextvars(user_id=str(user.id), role=claims.role)
    return user


def require_roles(allowed_roles: List[UserRole]) -> Callable:
    """Dependency factory for role-based access control"""
    def role_dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return current_user
    return role_dependency


get_candidate = require_roles([UserRole.CANDIDATE])
get_recruiter = require_roles([UserRole.RECRUITER])
