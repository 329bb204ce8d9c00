"""
Pydantic schemas for the booking-and-settlement invocation contract.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BusSnapshot(CamelModel):
    """The bus as the caller saw it when confirming."""

    id: str
    fare: int


class SettlementRequest(CamelModel):
    user_id: Optional[str] = None
    bus: BusSnapshot
    wallet_balance: int


class SettlementSuccess(CamelModel):
    kind: Literal["Success"] = "Success"
    booking_id: str
    amount_charged: int
    new_balance: int


class InsufficientFunds(CamelModel):
    kind: Literal["InsufficientFunds"] = "InsufficientFunds"
    shortfall: int


class TransactionFailed(CamelModel):
    kind: Literal["TransactionFailed"] = "TransactionFailed"
    reason: str


BookingOutcome = Annotated[
    Union[SettlementSuccess, InsufficientFunds, TransactionFailed],
    Field(discriminator="kind"),
]
