from app.schemas.user import UserCreate, UserLogin, ProfileResponse, Token
from app.schemas.bus import BusResponse, BusListResponse
from app.schemas.booking import BookingResponse, BookingListResponse, WalletSummary
from app.schemas.settlement import (
    BusSnapshot, SettlementRequest, SettlementSuccess, InsufficientFunds,
    TransactionFailed, BookingOutcome,
)

__all__ = [
    "UserCreate", "UserLogin", "ProfileResponse", "Token",
    "BusResponse", "BusListResponse",
    "BookingResponse", "BookingListResponse", "WalletSummary",
    "BusSnapshot", "SettlementRequest", "SettlementSuccess", "InsufficientFunds",
    "TransactionFailed", "BookingOutcome",
]
