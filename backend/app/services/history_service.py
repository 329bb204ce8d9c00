"""
Booking history and wallet summary for the signed-in user.
"""

import math
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.booking import Booking, BOOKING_STATUS_SUCCESS
from app.models.profile import Profile


async def list_user_bookings(
    db: AsyncSession,
    user_id: str,
    status_filter: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> tuple[list[Booking], int, int]:
    """
    Bookings newest first, optionally filtered by status.
    Returns (bookings, total, total_pages).
    """
    conditions = [Booking.user_id == user_id]
    if status_filter:
        conditions.append(Booking.status == status_filter)

    total = (await db.execute(select(func.count(Booking.id)).where(*conditions))).scalar_one()

    result = await db.execute(
        select(Booking)
        .where(*conditions)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    bookings = list(result.scalars().unique().all())

    return bookings, total, math.ceil(total / page_size)


async def get_wallet_summary(db: AsyncSession, user_id: str) -> dict:
    """Live balance plus count and sum of successful bookings."""
    balance = (
        await db.execute(select(Profile.wallet_balance).where(Profile.id == user_id))
    ).scalar_one_or_none()
    if balance is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Wallet not found",
        )

    row = (
        await db.execute(
            select(func.count(Booking.id), func.coalesce(func.sum(Booking.amount), 0)).where(
                Booking.user_id == user_id,
                Booking.status == BOOKING_STATUS_SUCCESS,
            )
        )
    ).one()

    return {
        "balance": balance,
        "total_bookings": row[0],
        "total_spent": int(row[1]),
    }
