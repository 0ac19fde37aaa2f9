"""
FastAPI dependencies.

The store is created once by create_app() and kept on app.state.
Services are cheap, stateless wrappers around it and are built
per request.
"""

from fastapi import Depends, Request

from ledger_engine.config import Settings
from ledger_engine.services.account_service import AccountService
from ledger_engine.services.ledger_service import LedgerService
from ledger_engine.services.ledger_store import SqlLedgerStore
from ledger_engine.services.transaction_service import TransactionService


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> SqlLedgerStore:
    return request.app.state.store


def get_account_service(
    store: SqlLedgerStore = Depends(get_store),
    settings: Settings = Depends(get_settings_from_app),
) -> AccountService:
    return AccountService(store, default_currency=settings.DEFAULT_CURRENCY)


def get_ledger_service(
    store: SqlLedgerStore = Depends(get_store),
) -> LedgerService:
    return LedgerService(store)


def get_transaction_service(
    store: SqlLedgerStore = Depends(get_store),
) -> TransactionService:
    return TransactionService(store)
