"""
Authentication service handling profile registration and login.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.profile import Profile
from app.schemas.user import UserCreate, UserLogin
from app.core.config import get_settings
from app.core.security import hash_password, verify_password, create_access_token
from app.core.logging import get_logger

logger = get_logger(__name__)


async def register_user(db: AsyncSession, user_data: UserCreate) -> Profile:
    """
    Register a new profile with its wallet.
    Raises 409 if the email already exists.
    """
    email = user_data.email.lower()
    result = await db.execute(select(Profile.id).where(Profile.email == email))
    if result.first():
        logger.warning("registration_failed", reason="email_exists", email=email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    profile = Profile(
        name=user_data.name,
        email=email,
        hashed_password=hash_password(user_data.password),
        wallet_balance=get_settings().INITIAL_WALLET_BALANCE,
    )
    db.add(profile)
    await db.flush()

    logger.info("user_registered", user_id=profile.id, wallet_balance=profile.wallet_balance)
    return profile


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """
    Authenticate and return a JWT access token.
    Raises 401 if credentials are invalid.
    """
    result = await db.execute(select(Profile).where(Profile.email == login_data.email.lower()))
    profile = result.scalar_one_or_none()

    if not profile or not verify_password(login_data.password, profile.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not profile.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    token = create_access_token(data={"sub": profile.id})
    logger.info("user_logged_in", user_id=profile.id)
    return token


async def get_profile(db: AsyncSession, user_id: str) -> Profile:
    result = await db.execute(
        select(Profile)
        .where(Profile.id == user_id)
        .execution_options(populate_existing=True)
    )
    profile = result.scalar_one_or_none()
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile
