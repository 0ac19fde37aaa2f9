"""
Tests for the LedgerService: derived balances, account ledgers,
and the ledger-wide integrity check.
"""

from decimal import Decimal

import pytest

from ledger_engine.errors import InsufficientFundsError, NotFoundError
from ledger_engine.models.base import utcnow
from ledger_engine.models.enums import (
    EntryType,
    TransactionStatus,
    TransactionType,
)
from ledger_engine.models.ledger_entry import LedgerEntry
from ledger_engine.models.transaction import Transaction
from ledger_engine.money import Money
from ledger_engine.schemas.transaction import (
    DepositRequest,
    WithdrawalRequest,
    TransferRequest,
)
from ledger_engine.services.balance import calculate_balance


class TestAccountDetail:

    def test_new_account_has_zero_balance(self, ledger_service, make_account):
        account = make_account()

        detail = ledger_service.get_account_detail(account.id)

        assert detail.account.id == account.id
        assert detail.balance == Money.zero()

    def test_balance_is_fold_of_entries(
        self, ledger_service, transaction_service, store, make_account, fund,
    ):
        account = make_account()
        fund(account, "250.75")
        transaction_service.withdraw(WithdrawalRequest(
            account_id=account.id, amount=Decimal("50.25"),
        ))

        detail = ledger_service.get_account_detail(account.id)

        assert detail.balance == Money.parse("200.5")
        assert detail.balance == calculate_balance(store.read_entries(account.id))

    def test_unknown_account(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.get_account_detail(999)


class TestAccountLedger:

    def test_entries_oldest_first(self, ledger_service, transaction_service, make_account, fund):
        account = make_account()
        other = make_account(user_id="u2")
        fund(account, "10")
        fund(account, "20")
        transaction_service.transfer(TransferRequest(
            source_account_id=account.id,
            destination_account_id=other.id,
            amount=Decimal("5"),
        ))

        entries = ledger_service.get_account_ledger(account.id)

        assert [(e.entry_type, e.amount) for e in entries] == [
            (EntryType.CREDIT, Decimal("10")),
            (EntryType.CREDIT, Decimal("20")),
            (EntryType.DEBIT, Decimal("5")),
        ]
        assert all(e.account_id == account.id for e in entries)

    def test_empty_ledger(self, ledger_service, make_account):
        account = make_account()
        assert ledger_service.get_account_ledger(account.id) == []

    def test_unknown_account(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.get_account_ledger(999)


class TestIntegrityCheck:

    def test_empty_ledger_is_balanced(self, ledger_service):
        report = ledger_service.check_integrity()

        assert report["is_balanced"] is True
        assert report["transaction_count"] == 0
        assert report["difference"] == Decimal("0")

    def test_ledger_with_activity_is_balanced(
        self, ledger_service, transaction_service, make_account,
    ):
        a = make_account()
        b = make_account(user_id="u2")
        transaction_service.deposit(DepositRequest(
            account_id=a.id, amount=Decimal("100"),
        ))
        transaction_service.transfer(TransferRequest(
            source_account_id=a.id,
            destination_account_id=b.id,
            amount=Decimal("30"),
        ))
        transaction_service.withdraw(WithdrawalRequest(
            account_id=b.id, amount=Decimal("12.5"),
        ))
        with pytest.raises(InsufficientFundsError):
            transaction_service.withdraw(WithdrawalRequest(
                account_id=b.id, amount=Decimal("100"),
            ))

        report = ledger_service.check_integrity()

        assert report["is_balanced"] is True
        assert report["total_credits"] == Decimal("130")
        assert report["total_debits"] == Decimal("42.5")
        assert report["external_inflow"] == Decimal("100")
        assert report["external_outflow"] == Decimal("12.5")
        assert report["difference"] == Decimal("0")
        assert report["transaction_count"] == 3
        assert report["malformed_transactions"] == []

    def test_transfer_missing_an_entry_is_reported(
        self, ledger_service, session_factory, make_account,
    ):
        """A transfer written around the store, with only its debit."""
        a = make_account()
        b = make_account(user_id="u2")

        with session_factory() as session:
            txn = Transaction(
                transaction_type=TransactionType.TRANSFER,
                status=TransactionStatus.COMPLETED,
                source_account_id=a.id,
                destination_account_id=b.id,
                amount=Decimal("10"),
                created_at=utcnow(),
            )
            txn.entries = [LedgerEntry(
                account_id=a.id,
                entry_type=EntryType.DEBIT,
                amount=Decimal("10"),
                created_at=utcnow(),
            )]
            session.add(txn)
            session.commit()
            txn_id = txn.id

        report = ledger_service.check_integrity()

        assert report["is_balanced"] is False
        assert report["malformed_transactions"] == [txn_id]
        assert report["difference"] == Decimal("-10")
