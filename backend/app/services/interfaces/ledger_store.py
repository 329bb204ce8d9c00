"""
Ledger store interface.
The settlement core talks to durable storage only through these primitives.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, NamedTuple, Optional, TypeVar

T = TypeVar("T")


class LedgerStoreError(Exception):
    """
    The store could not complete an operation: unavailable, timed out,
    constraint violation, or failed commit. The enclosing transaction has
    been rolled back by the time this reaches the caller.
    """


class BalanceSnapshot(NamedTuple):
    balance: int
    version: int


@dataclass(frozen=True)
class BookingRecord:
    booking_id: str
    user_id: str
    bus_id: str
    amount: int
    status: str


class LedgerStore(ABC):
    """
    Interface for wallet ledger storage.

    Implementations:
    - SqlAlchemyLedgerStore: relational store with a version column on
      profiles and a unique booking id on bookings
    """

    @abstractmethod
    async def read_balance(self, user_id: str) -> Optional[BalanceSnapshot]:
        """
        Read the live balance and its version token.

        Returns:
            BalanceSnapshot, or None if the account does not exist
        """

    @abstractmethod
    async def conditional_write(self, user_id: str, version: int, new_balance: int) -> bool:
        """
        Set the balance only if the stored version still equals `version`.

        Returns:
            True if written, False on a version conflict
        """

    @abstractmethod
    async def insert_booking(self, record: BookingRecord) -> bool:
        """
        Returns:
            True if inserted, False if `record.booking_id` already exists
        """

    @abstractmethod
    async def run_transaction(self, work: Callable[[], Awaitable[T]]) -> T:
        """
        Run `work` as one unit: commit if it returns, roll back if it raises
        (cancellation included). Driver failures surface as LedgerStoreError.
        """
