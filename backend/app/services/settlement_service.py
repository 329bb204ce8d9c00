"""
Booking settlement: admit, record, and debit as one atomic unit.

FLOW
====

  1. Validate the request shape. Nothing touches the store on failure.
  2. Admission against the caller's balance snapshot. A snapshot below the
     fare is answered with InsufficientFunds and the exact shortfall.
  3. Up to `max_attempts` transactions, each with a fresh booking id:
       read live balance + version
       -> live balance below fare: roll back, InsufficientFunds
       insert booking (status=Success, amount=fare)
       -> duplicate id: roll back, retry with a new id
       debit conditioned on the version read above
       -> conflict: roll back (booking insert included), retry
       commit -> Success
  4. Store failures roll back and surface as TransactionFailed. The caller
     may retry the whole call; no booking id is ever reused.

The snapshot only gates admission. The amount written is always computed
from the balance read inside the transaction, so a stale snapshot can never
produce a lost update.
"""

import secrets
import time
from typing import Optional

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_settlement, record_settlement_retry, settlement_latency
from app.models.booking import BOOKING_STATUS_SUCCESS
from app.schemas.settlement import (
    BookingOutcome,
    BusSnapshot,
    InsufficientFunds,
    SettlementSuccess,
    TransactionFailed,
)
from app.services.interfaces.ledger_store import BookingRecord, LedgerStore, LedgerStoreError

logger = get_logger(__name__)

BOOKING_ID_PREFIX = "BK"


class InvalidRequest(ValueError):
    """The request is malformed or references an unknown account."""


class _LiveBalanceInsufficient(Exception):
    def __init__(self, shortfall: int):
        super().__init__(shortfall)
        self.shortfall = shortfall


class _VersionConflict(Exception):
    pass


class _DuplicateBookingId(Exception):
    pass


def generate_booking_id() -> str:
    """BK + epoch millis + 32 random bits, so same-millisecond calls differ."""
    millis = time.time_ns() // 1_000_000
    return f"{BOOKING_ID_PREFIX}{millis}{secrets.token_hex(4).upper()}"


def _is_amount(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class BookingSettlement:
    def __init__(self, store: LedgerStore, max_attempts: Optional[int] = None):
        self.store = store
        self.max_attempts = max_attempts or get_settings().SETTLEMENT_MAX_ATTEMPTS

    async def execute(self, user_id: str, bus: BusSnapshot, balance_snapshot: int) -> BookingOutcome:
        with settlement_latency.time():
            try:
                self._validate(user_id, bus, balance_snapshot)
                outcome = await self._execute(user_id, bus, balance_snapshot)
            except InvalidRequest:
                record_settlement("invalid")
                raise

        record_settlement(_metric_label(outcome))
        return outcome

    @staticmethod
    def _validate(user_id: str, bus: BusSnapshot, balance_snapshot: int) -> None:
        if not user_id:
            raise InvalidRequest("userId is required")
        if bus is None or not bus.id:
            raise InvalidRequest("bus is required")
        if not _is_amount(bus.fare) or bus.fare < 0:
            raise InvalidRequest(f"fare must be a non-negative integer, got {bus.fare!r}")
        if not _is_amount(balance_snapshot) or balance_snapshot < 0:
            raise InvalidRequest(
                f"walletBalance must be a non-negative integer, got {balance_snapshot!r}"
            )

    async def _execute(self, user_id: str, bus: BusSnapshot, balance_snapshot: int) -> BookingOutcome:
        if balance_snapshot < bus.fare:
            shortfall = bus.fare - balance_snapshot
            logger.info(
                "settlement_rejected_insufficient_funds",
                user_id=user_id,
                bus_id=bus.id,
                fare=bus.fare,
                balance_snapshot=balance_snapshot,
                shortfall=shortfall,
            )
            return InsufficientFunds(shortfall=shortfall)

        for attempt in range(1, self.max_attempts + 1):
            booking_id = generate_booking_id()
            try:
                outcome = await self.store.run_transaction(
                    lambda: self._settle(user_id, bus, booking_id)
                )
            except _LiveBalanceInsufficient as exc:
                logger.info(
                    "settlement_rejected_live_balance",
                    user_id=user_id,
                    bus_id=bus.id,
                    fare=bus.fare,
                    shortfall=exc.shortfall,
                    attempt=attempt,
                )
                return InsufficientFunds(shortfall=exc.shortfall)
            except _VersionConflict:
                logger.info(
                    "settlement_retry",
                    user_id=user_id,
                    booking_id=booking_id,
                    attempt=attempt,
                    reason="version_conflict",
                )
                record_settlement_retry("version_conflict")
                continue
            except _DuplicateBookingId:
                logger.warning(
                    "settlement_retry",
                    user_id=user_id,
                    booking_id=booking_id,
                    attempt=attempt,
                    reason="duplicate_booking_id",
                )
                record_settlement_retry("duplicate_booking_id")
                continue
            except LedgerStoreError as exc:
                logger.error(
                    "settlement_failed",
                    user_id=user_id,
                    bus_id=bus.id,
                    booking_id=booking_id,
                    attempt=attempt,
                    error=str(exc),
                )
                return TransactionFailed(reason=str(exc))

            logger.info(
                "settlement_succeeded",
                user_id=user_id,
                bus_id=bus.id,
                booking_id=outcome.booking_id,
                amount=outcome.amount_charged,
                new_balance=outcome.new_balance,
                attempt=attempt,
            )
            return outcome

        logger.warning(
            "settlement_failed",
            user_id=user_id,
            bus_id=bus.id,
            attempts=self.max_attempts,
            reason="conflict_retries_exhausted",
        )
        return TransactionFailed(reason="conflict retries exhausted, please try again")

    async def _settle(self, user_id: str, bus: BusSnapshot, booking_id: str) -> SettlementSuccess:
        """Runs inside one store transaction. Any exception rolls it back."""
        snapshot = await self.store.read_balance(user_id)
        if snapshot is None:
            raise InvalidRequest(f"wallet account {user_id} does not exist")

        if snapshot.balance < bus.fare:
            raise _LiveBalanceInsufficient(bus.fare - snapshot.balance)

        inserted = await self.store.insert_booking(
            BookingRecord(
                booking_id=booking_id,
                user_id=user_id,
                bus_id=bus.id,
                amount=bus.fare,
                status=BOOKING_STATUS_SUCCESS,
            )
        )
        if not inserted:
            raise _DuplicateBookingId()

        new_balance = snapshot.balance - bus.fare
        if not await self.store.conditional_write(user_id, snapshot.version, new_balance):
            raise _VersionConflict()

        return SettlementSuccess(
            booking_id=booking_id,
            amount_charged=bus.fare,
            new_balance=new_balance,
        )


def _metric_label(outcome: BookingOutcome) -> str:
    if isinstance(outcome, SettlementSuccess):
        return "success"
    if isinstance(outcome, InsufficientFunds):
        return "insufficient_funds"
    return "transaction_failed"
