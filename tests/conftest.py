"""
Shared test fixtures.

Every test gets its own SQLite database file under tmp_path, so
tests never touch a real database and never see each other's
data. A file rather than :memory: so that several threads can
open their own connections in the concurrency tests.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from ledger_engine.config import Settings
from ledger_engine.main import create_app
from ledger_engine.models import Base
from ledger_engine.models.base import build_engine, build_session_factory
from ledger_engine.schemas.account import AccountCreate
from ledger_engine.schemas.transaction import DepositRequest
from ledger_engine.services import (
    AccountService,
    LedgerService,
    SqlLedgerStore,
    TransactionService,
)


@pytest.fixture
def engine(tmp_path):
    """
    Create all tables before each test, drop them after.

    The generous lock timeout keeps the threaded tests from
    failing on a slow machine.
    """
    engine = build_engine(
        f"sqlite:///{tmp_path / 'ledger.db'}",
        lock_timeout=30,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory):
    return SqlLedgerStore(session_factory)


@pytest.fixture
def account_service(store):
    return AccountService(store)


@pytest.fixture
def transaction_service(store):
    return TransactionService(store)


@pytest.fixture
def ledger_service(store):
    return LedgerService(store)


@pytest.fixture
def make_account(account_service):
    """Open an account; defaults to a USD checking account for u1."""
    def _make(user_id="u1", account_type="checking", currency=None):
        return account_service.create_account(AccountCreate(
            user_id=user_id,
            account_type=account_type,
            currency=currency,
        ))
    return _make


@pytest.fixture
def fund(transaction_service):
    """Deposit into an account and return the transaction."""
    def _fund(account, amount="100.00"):
        return transaction_service.deposit(DepositRequest(
            account_id=account.id,
            amount=Decimal(amount),
        ))
    return _fund


@pytest.fixture
def client(engine):
    """
    Provide a test client bound to the test database.

    Used as a context manager so the app's lifespan runs.
    """
    app = create_app(settings=Settings(), engine=engine)
    with TestClient(app) as client:
        yield client
