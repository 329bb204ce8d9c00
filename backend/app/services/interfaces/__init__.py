"""
Service interfaces for dependency inversion.
Settlement logic depends on these, never on a concrete store.
"""

from .ledger_store import BalanceSnapshot, BookingRecord, LedgerStore, LedgerStoreError

__all__ = ['BalanceSnapshot', 'BookingRecord', 'LedgerStore', 'LedgerStoreError']
