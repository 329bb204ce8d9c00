"""
Password hashing, JWT helpers, and the explicit session context.

Handlers never read "the current user" from ambient state. The bearer
token is resolved once per request into a SessionContext, which is then
passed down to the services that need it.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.logging import bind_session_user
from app.db.session import get_db
from app.models.profile import Profile

settings = get_settings()
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    """The signed-in user, resolved from the access token."""

    user_id: str
    email: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    payload = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload["exp"] = expire
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> str:
    """Return the profile id carried in the token's subject."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise _unauthorized() from exc

    subject = payload.get("sub")
    if not subject:
        raise _unauthorized()
    return subject


async def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> SessionContext:
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user_id = decode_access_token(credentials.credentials)
    result = await db.execute(
        select(Profile.id, Profile.email, Profile.is_active).where(Profile.id == user_id)
    )
    row = result.one_or_none()
    if row is None or not row.is_active:
        raise _unauthorized("Account not found or deactivated")

    bind_session_user(row.id)
    return SessionContext(user_id=row.id, email=row.email)
