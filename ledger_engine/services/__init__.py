"""Business logic services."""

from ledger_engine.services.ledger_store import SqlLedgerStore, WriteScope
from ledger_engine.services.ledger_service import LedgerService, AccountDetail
from ledger_engine.services.account_service import AccountService
from ledger_engine.services.transaction_service import TransactionService

__all__ = [
    "SqlLedgerStore",
    "WriteScope",
    "LedgerService",
    "AccountDetail",
    "AccountService",
    "TransactionService",
]
