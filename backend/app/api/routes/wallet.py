"""
Wallet summary endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.core.security import SessionContext, get_session_context
from app.schemas.booking import WalletSummary
from app.services.history_service import get_wallet_summary

router = APIRouter(prefix="/wallet", tags=["Wallet"])


@router.get("", response_model=WalletSummary)
async def wallet_summary(
    session: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """Live balance, number of successful bookings, and total spent."""
    return WalletSummary(**await get_wallet_summary(db, session.user_id))
