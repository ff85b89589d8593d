"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from tillbook.database.models import (
    BalanceEntry as ORMBalanceEntry,
    CashHistory as ORMCashHistory,
    Store as ORMStore,
    Transaction as ORMTransaction,
    Transfer as ORMTransfer,
)
from tillbook.database.mappers import (
    account_columns,
    account_ref_from_columns,
    balance_to_domain,
    history_to_domain,
    store_to_domain,
    transaction_to_domain,
    transfer_to_domain,
)
from tillbook.domain.entities import AccountRef, AccountStatus, TransactionKind


class TestAccountColumns:
    def test_store_columns(self):
        assert account_columns(AccountRef.store(4)) == {"store_id": 4, "savings_account_id": None}

    def test_savings_columns(self):
        assert account_columns(AccountRef.savings(4)) == {"store_id": None, "savings_account_id": 4}

    def test_columns_back_to_ref(self):
        assert account_ref_from_columns(4, None) == AccountRef.store(4)
        assert account_ref_from_columns(None, 6) == AccountRef.savings(6)


def test_store_to_domain():
    orm_store = ORMStore(
        id=1,
        code="ST-1",
        branch="Downtown",
        address="1 Main St",
        phone=None,
        email="a@b.c",
        status="stopped",
        created_at=datetime.now(UTC),
    )
    store = store_to_domain(orm_store)
    assert store.status is AccountStatus.STOPPED
    assert store.email == "a@b.c"


def test_balance_to_domain():
    entry = balance_to_domain(
        ORMBalanceEntry(
            id=3, store_id=None, savings_account_id=2, current_balance=Decimal("9.99"), last_updated=datetime.now(UTC)
        )
    )
    assert entry.account == AccountRef.savings(2)
    assert entry.current_balance == Decimal("9.99")


def test_transaction_to_domain():
    record = transaction_to_domain(
        ORMTransaction(
            id=8,
            store_id=1,
            savings_account_id=None,
            kind="expense",
            category="rent",
            amount=Decimal("120.00"),
            payment_method="cash",
            notes=None,
            transaction_date=date(2024, 1, 1),
            staff_identity="bob",
            reference=None,
            created_at=datetime.now(UTC),
        )
    )
    assert record.account == AccountRef.store(1)
    assert record.kind is TransactionKind.EXPENSE
    assert record.staff_identity == "bob"


def test_transfer_to_domain():
    record = transfer_to_domain(
        ORMTransfer(
            id=1,
            reference="TRF-1-x",
            from_type="savings",
            from_id=2,
            to_type="store",
            to_id=1,
            amount=Decimal("40"),
            notes=None,
            transaction_date=date(2024, 1, 1),
            staff_identity=None,
            outgoing_transaction_id=10,
            incoming_transaction_id=11,
            created_at=datetime.now(UTC),
        )
    )
    assert record.from_account == AccountRef.savings(2)
    assert record.to_account == AccountRef.store(1)


def test_history_to_domain():
    record = history_to_domain(
        ORMCashHistory(
            id=1,
            store_id=1,
            savings_account_id=None,
            date=date(2024, 1, 1),
            opening_balance=Decimal("0"),
            closing_balance=Decimal("330"),
            total_income=Decimal("500"),
            total_expense=Decimal("120"),
            total_transfer=Decimal("50"),
            net_change=Decimal("330"),
            created_at=datetime.now(UTC),
        )
    )
    assert record.account == AccountRef.store(1)
    assert record.net_change == Decimal("330")
