"""
Account service: opens accounts.

Accounts carry no balance and never change after creation, so
opening one is the only write this service performs.
"""

import logging

from ledger_engine.models.account import Account
from ledger_engine.schemas.account import AccountCreate
from ledger_engine.services.ledger_store import SqlLedgerStore

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, store: SqlLedgerStore, default_currency: str = "USD"):
        self.store = store
        self.default_currency = default_currency

    def create_account(self, request: AccountCreate) -> Account:
        """Open an account in the requested currency, or the default one."""
        account = self.store.create_account(
            user_id=request.user_id,
            account_type=request.account_type,
            currency=request.currency or self.default_currency,
        )
        logger.info(
            "Opened %s account %s for user %s in %s",
            account.account_type, account.id, account.user_id, account.currency,
        )
        return account
