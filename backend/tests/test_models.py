"""
Tests for model-level guarantees enforced by the database and the ORM mapping.
"""

import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, InvalidRequestError

from app.models.booking import Booking, BOOKING_STATUSES
from app.models.profile import Profile


@pytest.mark.asyncio
async def test_unknown_booking_status_rejected(session_factory, test_user, test_bus):
    async with session_factory() as s:
        s.add(Booking(
            booking_id="BK1700000000000BADBAD00",
            user_id=test_user.id,
            bus_id=test_bus.id,
            amount=300,
            status="Pending",
        ))
        with pytest.raises(IntegrityError):
            await s.commit()
        await s.rollback()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", BOOKING_STATUSES)
async def test_known_booking_statuses_accepted(session_factory, test_user, test_bus, status):
    async with session_factory() as s:
        s.add(Booking(
            booking_id=f"BK1700000000000{status.upper()[:8]:0<8}",
            user_id=test_user.id,
            bus_id=test_bus.id,
            amount=300,
            status=status,
        ))
        await s.commit()


@pytest.mark.asyncio
async def test_wallet_balance_cannot_go_negative(session_factory, test_user):
    async with session_factory() as s:
        with pytest.raises(IntegrityError):
            await s.execute(
                update(Profile).where(Profile.id == test_user.id).values(wallet_balance=-1)
            )
        await s.rollback()


@pytest.mark.asyncio
async def test_profile_bookings_are_never_loaded_implicitly(session_factory, test_user):
    async with session_factory() as s:
        profile = (await s.execute(select(Profile).where(Profile.id == test_user.id))).scalar_one()
        with pytest.raises(InvalidRequestError):
            profile.bookings
