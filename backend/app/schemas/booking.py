"""
Pydantic schemas for booking history and wallet summary responses.
"""

from datetime import datetime
from typing import Optional

from app.schemas.settlement import CamelModel


class BookingBus(CamelModel):
    name: str
    from_city: str
    to_city: str

    model_config = {"from_attributes": True}


class BookingResponse(CamelModel):
    booking_id: str
    user_id: str
    bus_id: str
    amount: int
    status: str
    created_at: datetime
    bus: Optional[BookingBus] = None

    model_config = {"from_attributes": True}


class BookingListResponse(CamelModel):
    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class WalletSummary(CamelModel):
    balance: int
    total_bookings: int
    total_spent: int
