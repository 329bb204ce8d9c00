"""
SQLAlchemy implementation of the ledger store.

CONCURRENCY STRATEGY: Optimistic Locking on the Wallet Row
==========================================================

Problem:
  Two devices of the same user confirm bookings at the same time.
  Both read wallet_balance=500, both write 500-300=200, both succeed.
  Result: two tickets paid for with one fare.

Solution:
  The profile row carries a `version` column.

  1. SELECT wallet_balance, version FROM profiles WHERE id = :user_id
  2. UPDATE profiles SET wallet_balance = :new_balance, version = version + 1
     WHERE id = :user_id AND version = :version
  3. If rows_affected == 0, someone else wrote the wallet first -> conflict

  Under READ COMMITTED the second UPDATE blocks on the first one's row lock,
  then re-evaluates its WHERE clause against the committed row and matches
  nothing. The CHECK (wallet_balance >= 0) constraint is the final safety net.

The booking insert and the debit share one database transaction, so a
rollback for any reason removes both.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.metrics import record_ledger_operation
from app.db.base import utc_now
from app.models.booking import Booking
from app.models.profile import Profile
from app.services.interfaces.ledger_store import (
    BalanceSnapshot,
    BookingRecord,
    LedgerStore,
    LedgerStoreError,
)

logger = get_logger(__name__)

T = TypeVar("T")

# Dialects whose INSERT supports ON CONFLICT DO NOTHING ... RETURNING
_CONFLICT_AWARE_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class SqlAlchemyLedgerStore(LedgerStore):
    """Ledger store bound to one AsyncSession. Not shared between requests."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def read_balance(self, user_id: str) -> Optional[BalanceSnapshot]:
        record_ledger_operation("read_balance")
        result = await self.db.execute(
            select(Profile.wallet_balance, Profile.version).where(Profile.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return BalanceSnapshot(balance=row.wallet_balance, version=row.version)

    async def conditional_write(self, user_id: str, version: int, new_balance: int) -> bool:
        if new_balance < 0:
            raise ValueError(f"refusing to write negative balance {new_balance}")

        record_ledger_operation("conditional_write")
        result = await self.db.execute(
            update(Profile)
            .where(Profile.id == user_id, Profile.version == version)
            .values(
                wallet_balance=new_balance,
                version=Profile.version + 1,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def insert_booking(self, record: BookingRecord) -> bool:
        """
        Single statement: a concurrent insert of the same id either blocks on
        the unique index and then does nothing, or wins. No check-then-insert.
        """
        record_ledger_operation("insert_booking")
        dialect = self.db.get_bind().dialect.name
        try:
            conflict_aware_insert = _CONFLICT_AWARE_INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(f"booking insert not supported on {dialect}") from None

        result = await self.db.execute(
            conflict_aware_insert(Booking)
            .values(
                booking_id=record.booking_id,
                user_id=record.user_id,
                bus_id=record.bus_id,
                amount=record.amount,
                status=record.status,
                created_at=utc_now(),
            )
            .on_conflict_do_nothing(index_elements=[Booking.booking_id])
            .returning(Booking.id)
        )
        return result.scalar_one_or_none() is not None

    async def run_transaction(self, work: Callable[[], Awaitable[T]]) -> T:
        try:
            result = await work()
            await self.db.commit()
        except (SQLAlchemyError, asyncio.TimeoutError) as exc:
            await self._rollback()
            # Statement text and bound parameters stay in the log only
            logger.error(
                "ledger_transaction_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise LedgerStoreError(f"ledger store unavailable: {type(exc).__name__}") from exc
        except BaseException:
            await self._rollback()
            raise

        record_ledger_operation("commit")
        return result

    async def _rollback(self) -> None:
        record_ledger_operation("rollback")
        try:
            await self.db.rollback()
        except SQLAlchemyError as exc:
            # The server discards the transaction when the connection drops
            logger.error("ledger_rollback_failed", error=str(exc))
