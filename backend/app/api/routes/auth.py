"""
Authentication endpoints: register, login, and the current profile.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.core.security import SessionContext, get_session_context
from app.schemas.user import UserCreate, UserLogin, ProfileResponse, Token
from app.services.auth_service import register_user, authenticate_user, get_profile

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new profile. The wallet starts with the configured balance."""
    return await register_user(db, user_data)


@router.post("/login", response_model=Token)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    token = await authenticate_user(db, login_data)
    return Token(access_token=token)


@router.get("/me", response_model=ProfileResponse)
async def me(
    session: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    return await get_profile(db, session.user_id)
