"""
Transaction service: deposits, withdrawals, and transfers.

Each operation:
1. Validates the amount and the request shape (no I/O)
2. Opens a write scope that locks every account it touches
3. Validates the accounts (exist, matching currency)
4. Replays an earlier result if the idempotency key was used before
5. Checks funds against the balance read under the lock
6. Appends the transaction record and its entries

Steps 3 to 6 run in one database transaction. If any of them
fails, nothing is written: there is never a transaction without
its entries, or an entry without its transaction.
"""

import logging

from ledger_engine.errors import (
    InsufficientFundsError,
    InvalidTransferError,
    NotFoundError,
    ValidationError,
)
from ledger_engine.models.account import Account
from ledger_engine.models.enums import TransactionType
from ledger_engine.models.transaction import Transaction
from ledger_engine.money import Money
from ledger_engine.schemas.transaction import (
    DepositRequest,
    WithdrawalRequest,
    TransferRequest,
)
from ledger_engine.services.ledger_store import SqlLedgerStore, WriteScope

logger = logging.getLogger(__name__)


class TransactionService:

    def __init__(self, store: SqlLedgerStore):
        self.store = store

    def deposit(self, request: DepositRequest) -> Transaction:
        """
        Credit an account.

        Deposits cannot fail for balance reasons, but still take the
        account lock so the entry is ordered with concurrent debits.
        """
        amount = Money.parse(request.amount)

        with self.store.write_scope([request.account_id]) as scope:
            account = scope.account(request.account_id)
            self._check_currency(account, request.currency)

            existing = self._replay(
                scope, request.idempotency_key,
                TransactionType.DEPOSIT, amount,
                destination_id=account.id,
            )
            if existing is not None:
                return existing

            txn = scope.append(
                TransactionType.DEPOSIT,
                amount,
                destination_id=account.id,
                idempotency_key=request.idempotency_key,
            )

        logger.info(
            "Deposit %s completed: %s into account %s",
            txn.id, amount, account.id,
        )
        return txn

    def withdraw(self, request: WithdrawalRequest) -> Transaction:
        """Debit an account if its locked balance covers the amount."""
        amount = Money.parse(request.amount)

        with self.store.write_scope([request.account_id]) as scope:
            account = scope.account(request.account_id)
            self._check_currency(account, request.currency)

            existing = self._replay(
                scope, request.idempotency_key,
                TransactionType.WITHDRAWAL, amount,
                source_id=account.id,
            )
            if existing is not None:
                return existing

            self._check_funds(scope, account.id, amount)

            txn = scope.append(
                TransactionType.WITHDRAWAL,
                amount,
                source_id=account.id,
                idempotency_key=request.idempotency_key,
            )

        logger.info(
            "Withdrawal %s completed: %s from account %s",
            txn.id, amount, account.id,
        )
        return txn

    def transfer(self, request: TransferRequest) -> Transaction:
        """
        Move an amount from one account to another.

        Both accounts are locked (lowest id first) so that two
        opposite transfers between the same pair cannot deadlock.
        """
        amount = Money.parse(request.amount)

        source_id = request.source_account_id
        destination_id = request.destination_account_id
        if source_id == destination_id:
            raise InvalidTransferError("Cannot transfer to the same account")

        with self.store.write_scope([source_id, destination_id]) as scope:
            try:
                source = scope.account(source_id)
                destination = scope.account(destination_id)
            except NotFoundError as exc:
                logger.warning("Transfer rejected: %s", exc.message)
                raise InvalidTransferError(exc.message) from exc

            if source.currency != destination.currency:
                logger.warning(
                    "Transfer rejected: %s account %s to %s account %s",
                    source.currency, source.id,
                    destination.currency, destination.id,
                )
                raise InvalidTransferError(
                    f"Account {source.id} holds {source.currency}, "
                    f"account {destination.id} holds {destination.currency}"
                )
            self._check_currency(source, request.currency)

            existing = self._replay(
                scope, request.idempotency_key,
                TransactionType.TRANSFER, amount,
                source_id=source.id,
                destination_id=destination.id,
            )
            if existing is not None:
                return existing

            self._check_funds(scope, source.id, amount)

            txn = scope.append(
                TransactionType.TRANSFER,
                amount,
                source_id=source.id,
                destination_id=destination.id,
                idempotency_key=request.idempotency_key,
            )

        logger.info(
            "Transfer %s completed: %s from account %s to account %s",
            txn.id, amount, source.id, destination.id,
        )
        return txn

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Get a transaction and its entries by ID."""
        return self.store.read_transaction(transaction_id)

    # --- Checks ---

    @staticmethod
    def _check_currency(account: Account, currency: str | None) -> None:
        if currency is not None and currency != account.currency:
            raise ValidationError(
                f"Account {account.id} currency is {account.currency}, "
                f"request currency is {currency}"
            )

    @staticmethod
    def _check_funds(scope: WriteScope, account_id: int, amount: Money) -> None:
        balance = scope.balance(account_id)
        if balance.less_than(amount):
            logger.warning(
                "Insufficient funds in account %s: available=%s, requested=%s",
                account_id, balance, amount,
            )
            raise InsufficientFundsError(account_id, balance, amount)

    @staticmethod
    def _replay(
        scope: WriteScope,
        idempotency_key: str | None,
        transaction_type: TransactionType,
        amount: Money,
        source_id: int | None = None,
        destination_id: int | None = None,
    ) -> Transaction | None:
        """
        Return the transaction already recorded under this key, if any.

        The key must have been used for the same operation; reusing
        it for a different one is a caller error.
        """
        if idempotency_key is None:
            return None

        existing = scope.find_by_idempotency_key(idempotency_key)
        if existing is None:
            return None

        if (
            existing.transaction_type != transaction_type
            or Money.of(existing.amount) != amount
            or existing.source_account_id != source_id
            or existing.destination_account_id != destination_id
        ):
            raise ValidationError(
                f"Idempotency key '{idempotency_key}' was already used "
                f"for a different operation"
            )

        logger.info(
            "Idempotency key %s matched transaction %s",
            idempotency_key, existing.id,
        )
        return existing
