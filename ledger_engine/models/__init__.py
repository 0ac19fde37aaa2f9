"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from ledger_engine.models.base import Base
from ledger_engine.models.enums import (
    EntryType,
    TransactionType,
    TransactionStatus,
)
from ledger_engine.models.account import Account
from ledger_engine.models.transaction import Transaction
from ledger_engine.models.ledger_entry import LedgerEntry

__all__ = [
    "Base",
    "EntryType",
    "TransactionType",
    "TransactionStatus",
    "Account",
    "Transaction",
    "LedgerEntry",
]
