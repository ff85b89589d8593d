"""Shared pytest fixtures for tillbook tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from tillbook.database.factories import create_sqlite_database
from tillbook.database.sqlalchemy_db import SQLAlchemyDatabase
from tillbook.domain.account import AccountService
from tillbook.domain.balance import BalanceLedger
from tillbook.domain.entities import AccountRef
from tillbook.domain.errors import DependencyError
from tillbook.domain.snapshot import SnapshotService
from tillbook.domain.transaction import TransactionService
from tillbook.domain.transfer import TransferService


class FlakyDatabase(SQLAlchemyDatabase):
    """SQLAlchemyDatabase whose chosen method fails on its n-th call.

    Used to inject persistence failures at a specific step of a workflow.
    """

    def __init__(self, database_url: str, method: str, fail_on_call: int = 1):
        super().__init__(database_url)
        self.method = method
        self.fail_on_call = fail_on_call
        self.calls = 0

    def _maybe_fail(self, name: str) -> None:
        if name != self.method:
            return
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise DependencyError(f"Simulated failure in {name}")

    def create_transaction(self, *args, **kwargs):
        self._maybe_fail("create_transaction")
        return super().create_transaction(*args, **kwargs)

    def create_transfer(self, *args, **kwargs):
        self._maybe_fail("create_transfer")
        return super().create_transfer(*args, **kwargs)

    def increment_balance(self, *args, **kwargs):
        self._maybe_fail("increment_balance")
        return super().increment_balance(*args, **kwargs)

    def delete_transaction(self, *args, **kwargs):
        self._maybe_fail("delete_transaction")
        return super().delete_transaction(*args, **kwargs)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def flaky_db(temp_db):
    """Factory for a FlakyDatabase sharing the temporary database file."""
    created = []

    def _make(method: str, fail_on_call: int = 1) -> FlakyDatabase:
        db = FlakyDatabase(temp_db.database_url, method, fail_on_call)
        created.append(db)
        return db

    yield _make

    for db in created:
        db.disconnect()


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def ledger(temp_db):
    """Create a BalanceLedger with a temporary database."""
    return BalanceLedger(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def transfer_service(temp_db):
    """Create a TransferService with a temporary database."""
    return TransferService(temp_db)


@pytest.fixture
def snapshot_service(temp_db):
    """Create a SnapshotService with a temporary database."""
    return SnapshotService(temp_db)


@pytest.fixture
def sample_store(account_service):
    """Create an active store and return its reference."""
    store_id = account_service.create_store(code="ST-001", branch="Downtown", address="1 Main St")
    return AccountRef.store(store_id)


@pytest.fixture
def sample_savings(account_service):
    """Create an active savings account and return its reference."""
    account_id = account_service.create_savings_account(
        code="SAV-01", name="Reserve", account_type="fixed", bank_name="City Bank"
    )
    return AccountRef.savings(account_id)


@pytest.fixture
def funded_accounts(ledger, sample_store, sample_savings):
    """Store holding 100 and savings account holding 50."""
    ledger.set_absolute(sample_store, Decimal("100"))
    ledger.set_absolute(sample_savings, Decimal("50"))
    return sample_store, sample_savings


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
