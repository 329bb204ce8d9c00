"""
Booking endpoints: settlement against the wallet, and booking history.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.core.config import get_settings
from app.core.security import SessionContext, get_session_context
from app.core.logging import get_logger
from app.schemas.booking import BookingListResponse, BookingResponse
from app.schemas.settlement import (
    BookingOutcome,
    BusSnapshot,
    InsufficientFunds,
    SettlementRequest,
    TransactionFailed,
)
from app.services.bus_service import get_bus
from app.services.history_service import list_user_bookings
from app.services.ledger_store import SqlAlchemyLedgerStore
from app.services.settlement_service import BookingSettlement, InvalidRequest

logger = get_logger(__name__)
settings = get_settings()
router = APIRouter(prefix="/bookings", tags=["Bookings"])

OUTCOME_STATUS_CODES = {
    "Success": status.HTTP_201_CREATED,
    "InsufficientFunds": status.HTTP_402_PAYMENT_REQUIRED,
    "TransactionFailed": status.HTTP_503_SERVICE_UNAVAILABLE,
}


@router.post(
    "/",
    response_model=BookingOutcome,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {"model": InsufficientFunds, "description": "Wallet balance below the fare"},
        503: {"model": TransactionFailed, "description": "Nothing was charged; safe to retry"},
    },
)
async def create_booking(
    payload: SettlementRequest,
    response: Response,
    session: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a bus and pay from the wallet.

    The booking row and the wallet debit commit together or not at all.
    A 402 carries the shortfall; a 503 means nothing was charged and the
    request can be retried with a fresh balance.
    """
    if payload.user_id is not None and payload.user_id != session.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot book on behalf of another user",
        )

    bus = await get_bus(db, payload.bus.id)
    if bus.fare != payload.bus.fare:
        logger.info("booking_stale_fare", bus_id=bus.id, requested=payload.bus.fare, current=bus.fare)
        raise HTTPException(
            status_code=422,
            detail=f"Fare for bus {bus.id} is now {bus.fare}, please review and confirm again",
        )

    settlement = BookingSettlement(SqlAlchemyLedgerStore(db), settings.SETTLEMENT_MAX_ATTEMPTS)
    try:
        outcome = await settlement.execute(
            session.user_id,
            BusSnapshot(id=bus.id, fare=bus.fare),
            payload.wallet_balance,
        )
    except InvalidRequest as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    response.status_code = OUTCOME_STATUS_CODES[outcome.kind]
    return outcome


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    status_filter: Optional[Literal["Success", "Failed"]] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
    session: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """The signed-in user's bookings, newest first."""
    page_size = page_size or settings.BOOKING_HISTORY_PAGE_SIZE
    bookings, total, total_pages = await list_user_bookings(
        db, session.user_id, status_filter, page, page_size
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
    )
