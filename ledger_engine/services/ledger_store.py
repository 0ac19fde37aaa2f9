"""
Ledger store: durable accounts, transactions and entries.

The store is the only code that opens database sessions. Services
receive it by injection and never see a session factory or an
engine.

Writes go through write_scope(), which opens one database
transaction and locks the accounts it names before anything is
read:

    with store.write_scope([source_id, destination_id]) as scope:
        balance = scope.balance(source_id)
        ...
        scope.append(TransactionType.TRANSFER, amount, ...)

On PostgreSQL the locks are row locks (SELECT ... FOR UPDATE) on
the account rows, taken in ascending id order. On SQLite the scope
begins with BEGIN IMMEDIATE, which takes the database write lock.
Either way, a balance read inside the scope cannot be invalidated
by a concurrent writer before the scope commits.

Leaving the block normally commits. Any exception rolls back, so
a failed operation leaves no entries and no transaction row.
SQLAlchemy errors (lock timeouts, constraint violations, lost
connections) are raised as StoreFailureError.
"""

import logging
from collections import Counter, defaultdict
from contextlib import contextmanager
from typing import Iterable, Iterator

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, selectinload

from ledger_engine.errors import (
    NotFoundError,
    StoreFailureError,
    ValidationError,
)
from ledger_engine.models.account import Account
from ledger_engine.models.base import utcnow
from ledger_engine.models.enums import (
    ENTRY_SHAPES,
    EntryType,
    TransactionStatus,
    TransactionType,
)
from ledger_engine.models.ledger_entry import LedgerEntry
from ledger_engine.models.transaction import Transaction
from ledger_engine.money import CURRENCY_CODE, Money
from ledger_engine.services.balance import calculate_balance

logger = logging.getLogger(__name__)

USER_ID_MAX_LENGTH = 50
ACCOUNT_TYPE_MAX_LENGTH = 20


class WriteScope:
    """
    One locked, all-or-nothing unit of work.

    Only accounts named when the scope was opened may be read or
    written through it.
    """

    def __init__(self, session: Session, requested: list[int], accounts: list[Account]):
        self.session = session
        self._requested = set(requested)
        self._accounts = {account.id: account for account in accounts}

    def account(self, account_id: int) -> Account:
        self._check_locked(account_id)
        account = self._accounts.get(account_id)
        if account is None:
            raise NotFoundError(f"Account {account_id}")
        return account

    def balance(self, account_id: int) -> Money:
        """Current balance of a locked account."""
        self.account(account_id)
        rows = self.session.execute(
            select(LedgerEntry.entry_type, LedgerEntry.amount).where(
                LedgerEntry.account_id == account_id
            )
        ).all()
        return calculate_balance(rows)

    def find_by_idempotency_key(self, key: str) -> Transaction | None:
        return self.session.execute(
            select(Transaction)
            .where(Transaction.idempotency_key == key)
            .options(selectinload(Transaction.entries))
        ).scalar_one_or_none()

    def append(
        self,
        transaction_type: TransactionType,
        amount: Money,
        source_id: int | None = None,
        destination_id: int | None = None,
        idempotency_key: str | None = None,
    ) -> Transaction:
        """
        Add a COMPLETED transaction and exactly the entries its type requires.

        Everything is flushed together; nothing is visible to other
        sessions until the scope commits.
        """
        roles = {"source": source_id, "destination": destination_id}
        shape = ENTRY_SHAPES[transaction_type]
        needed = {role for role, _ in shape}
        for role, account_id in roles.items():
            if (account_id is not None) != (role in needed):
                raise ValueError(
                    f"{transaction_type.value} transaction "
                    f"{'requires' if role in needed else 'does not take'} "
                    f"a {role} account"
                )
            if account_id is not None:
                self.account(account_id)

        now = utcnow()
        txn = Transaction(
            transaction_type=transaction_type,
            status=TransactionStatus.COMPLETED,
            source_account_id=source_id,
            destination_account_id=destination_id,
            amount=amount.amount,
            idempotency_key=idempotency_key,
            created_at=now,
        )
        txn.entries = [
            LedgerEntry(
                account_id=roles[role],
                entry_type=entry_type,
                amount=amount.amount,
                created_at=now,
            )
            for role, entry_type in shape
        ]
        self.session.add(txn)
        self.session.flush()
        return txn

    def _check_locked(self, account_id: int) -> None:
        if account_id not in self._requested:
            raise ValueError(f"Account {account_id} is not locked by this scope")


class SqlLedgerStore:
    """SQLAlchemy-backed ledger store. Works on PostgreSQL and SQLite."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    # --- Writes ---

    @contextmanager
    def write_scope(self, account_ids: Iterable[int]) -> Iterator[WriteScope]:
        ids = sorted(set(account_ids))
        with self._session(begin="IMMEDIATE") as session:
            accounts = session.execute(
                select(Account)
                .where(Account.id.in_(ids))
                .order_by(Account.id)
                .with_for_update()
            ).scalars().all()
            yield WriteScope(session, ids, list(accounts))

    def atomic_append(
        self,
        transaction_type: TransactionType,
        amount: Money,
        source_id: int | None = None,
        destination_id: int | None = None,
        idempotency_key: str | None = None,
    ) -> Transaction:
        """Append one transaction without a funds check."""
        ids = [i for i in (source_id, destination_id) if i is not None]
        with self.write_scope(ids) as scope:
            return scope.append(
                transaction_type,
                amount,
                source_id=source_id,
                destination_id=destination_id,
                idempotency_key=idempotency_key,
            )

    def create_account(
        self, user_id: str | None, account_type: str | None, currency: str
    ) -> Account:
        """
        Create an account.

        Raises ValidationError if user_id or account_type is missing
        or too long, or currency is not a three-letter upper-case code.
        """
        if not user_id or not user_id.strip():
            raise ValidationError("user_id is required")
        if not account_type or not account_type.strip():
            raise ValidationError("account_type is required")
        if len(user_id) > USER_ID_MAX_LENGTH:
            raise ValidationError(
                f"user_id is longer than {USER_ID_MAX_LENGTH} characters"
            )
        if len(account_type) > ACCOUNT_TYPE_MAX_LENGTH:
            raise ValidationError(
                f"account_type is longer than {ACCOUNT_TYPE_MAX_LENGTH} characters"
            )
        if not currency or not CURRENCY_CODE.match(currency):
            raise ValidationError(
                f"currency must be a three-letter upper-case code, got {currency!r}"
            )

        with self._session(begin="IMMEDIATE") as session:
            account = Account(
                user_id=user_id,
                account_type=account_type,
                currency=currency,
            )
            session.add(account)
            session.flush()
            return account

    # --- Reads ---

    def read_account(self, account_id: int) -> Account:
        with self._session() as session:
            account = session.get(Account, account_id)
            if account is None:
                raise NotFoundError(f"Account {account_id}")
            return account

    def read_entries(self, account_id: int) -> list[LedgerEntry]:
        """All entries for an account, oldest first."""
        return self.read_account_entries(account_id)[1]

    def read_account_entries(
        self, account_id: int
    ) -> tuple[Account, list[LedgerEntry]]:
        """An account and its entries, read from one snapshot."""
        with self._session() as session:
            account = session.get(Account, account_id)
            if account is None:
                raise NotFoundError(f"Account {account_id}")
            entries = session.execute(
                select(LedgerEntry)
                .where(LedgerEntry.account_id == account_id)
                .order_by(LedgerEntry.created_at, LedgerEntry.id)
            ).scalars().all()
            return account, list(entries)

    def read_transaction(self, transaction_id: int) -> Transaction:
        with self._session() as session:
            txn = session.execute(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .options(selectinload(Transaction.entries))
            ).scalar_one_or_none()
            if txn is None:
                raise NotFoundError(f"Transaction {transaction_id}")
            return txn

    def ledger_totals(self) -> dict:
        """
        Ledger-wide sums used by the integrity check.

        Returns entry totals per direction, transaction totals per
        type, and the ids of transactions whose entries do not match
        their type's shape or amount.
        """
        with self._session() as session:
            entry_totals = dict(session.execute(
                select(LedgerEntry.entry_type, func.sum(LedgerEntry.amount))
                .group_by(LedgerEntry.entry_type)
            ).all())
            transaction_totals = dict(session.execute(
                select(Transaction.transaction_type, func.sum(Transaction.amount))
                .group_by(Transaction.transaction_type)
            ).all())

            counts = session.execute(
                select(
                    Transaction.id,
                    Transaction.transaction_type,
                    LedgerEntry.entry_type,
                    func.count(LedgerEntry.id),
                )
                .outerjoin(LedgerEntry, LedgerEntry.transaction_id == Transaction.id)
                .group_by(
                    Transaction.id,
                    Transaction.transaction_type,
                    LedgerEntry.entry_type,
                )
            ).all()
            amount_mismatches = session.execute(
                select(Transaction.id)
                .join(LedgerEntry, LedgerEntry.transaction_id == Transaction.id)
                .where(LedgerEntry.amount != Transaction.amount)
                .distinct()
            ).scalars().all()

        actual: dict[int, Counter] = defaultdict(Counter)
        types: dict[int, TransactionType] = {}
        for txn_id, txn_type, entry_type, count in counts:
            types[txn_id] = txn_type
            if entry_type is not None:
                actual[txn_id][entry_type] += count

        malformed = set(amount_mismatches)
        for txn_id, txn_type in types.items():
            expected = Counter(entry_type for _, entry_type in ENTRY_SHAPES[txn_type])
            if actual[txn_id] != expected:
                malformed.add(txn_id)

        def money(value) -> Money:
            return Money.zero() if value is None else Money.of(value)

        return {
            "total_debits": money(entry_totals.get(EntryType.DEBIT)),
            "total_credits": money(entry_totals.get(EntryType.CREDIT)),
            "deposits": money(transaction_totals.get(TransactionType.DEPOSIT)),
            "withdrawals": money(transaction_totals.get(TransactionType.WITHDRAWAL)),
            "transaction_count": len(types),
            "malformed_transactions": sorted(malformed),
        }

    def ping(self) -> None:
        with self._session() as session:
            session.execute(select(1))

    # --- Sessions ---

    @contextmanager
    def _session(self, begin: str = "DEFERRED") -> Iterator[Session]:
        """
        A session whose work is committed on success and rolled back otherwise.

        begin is the SQLite BEGIN mode for the transaction; other
        databases ignore it.
        """
        session = self._session_factory()
        try:
            session.connection(execution_options={"sqlite_begin": begin})
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Ledger store operation failed: %s", exc)
            raise StoreFailureError(
                f"Ledger store unavailable or write rejected "
                f"({exc.__class__.__name__})"
            ) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
