from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID
from jose import JWTError, jwt
from swipematch.core.config import settings

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    """Verified identity carried by an access token."""
    user_id: UUID
    role: str


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token. ``data`` must carry ``sub`` and ``role``."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(seconds=settings.access_token_expires)

    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode JWT token and return payload if valid"""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    except JWTError:
        return None


def verify_token(token: str, token_type: str = "access") -> Optional[TokenClaims]:
    """Verify JWT token and return its claims, or None when invalid."""
    payload = decode_token(token)
    if not payload:
        return None

    subject = payload.get("sub")
    role = payload.get("role")
    if subject is None or role is None or payload.get("type") != token_type:
        return None

    try:
        user_id = UUID(str(subject))
    except (ValueError, TypeError):
        return None

    return TokenClaims(user_id=user_id, role=role)
