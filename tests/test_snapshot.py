"""Tests for daily cash history snapshots."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from tillbook.domain.entities import AccountStatus, TransactionKind
from tillbook.domain.errors import ValidationError
from tillbook.domain.snapshot import summarize_day

DAY = date(2024, 3, 10)


def _post(transaction_service, account, kind, amount, on_date=DAY):
    return transaction_service.post_transaction(
        account, kind, "misc", amount, "cash", transaction_date=on_date
    )


def test_summarize_day(transaction_service, sample_store):
    records = [
        _post(transaction_service, sample_store, "income", "10"),
        _post(transaction_service, sample_store, "income", "5"),
        _post(transaction_service, sample_store, "transfer", "2"),
    ]
    totals = summarize_day(records)
    assert totals[TransactionKind.INCOME] == Decimal("15")
    assert totals[TransactionKind.EXPENSE] == Decimal("0")
    assert totals[TransactionKind.TRANSFER] == Decimal("2")


def test_first_snapshot(snapshot_service, transaction_service, sample_store):
    """No prior day: opening 0, income 500, expense 120, transfer 50 -> closing 330."""
    _post(transaction_service, sample_store, "income", "500")
    _post(transaction_service, sample_store, "expense", "120")
    _post(transaction_service, sample_store, "transfer", "50")

    record = snapshot_service.compute_snapshot(sample_store, DAY)

    assert record.account == sample_store
    assert record.date == DAY
    assert record.opening_balance == Decimal("0")
    assert record.total_income == Decimal("500")
    assert record.total_expense == Decimal("120")
    assert record.total_transfer == Decimal("50")
    assert record.net_change == Decimal("330")
    assert record.closing_balance == Decimal("330")


def test_opening_balance_is_previous_closing(snapshot_service, transaction_service, sample_store):
    _post(transaction_service, sample_store, "income", "200", on_date=DAY - timedelta(days=1))
    snapshot_service.compute_snapshot(sample_store, DAY - timedelta(days=1))
    _post(transaction_service, sample_store, "expense", "30")

    record = snapshot_service.compute_snapshot(sample_store, DAY)

    assert record.opening_balance == Decimal("200")
    assert record.closing_balance == Decimal("170")


def test_gap_day_opens_at_zero(snapshot_service, transaction_service, sample_store):
    """Only the immediately preceding calendar day counts."""
    _post(transaction_service, sample_store, "income", "200", on_date=DAY - timedelta(days=2))
    snapshot_service.compute_snapshot(sample_store, DAY - timedelta(days=2))

    record = snapshot_service.compute_snapshot(sample_store, DAY)

    assert record.opening_balance == Decimal("0")
    assert record.closing_balance == Decimal("0")


def test_snapshot_is_idempotent(snapshot_service, transaction_service, sample_store):
    _post(transaction_service, sample_store, "income", "500")

    first = snapshot_service.compute_snapshot(sample_store, DAY)
    second = snapshot_service.compute_snapshot(sample_store, DAY)

    assert first == second
    assert len(snapshot_service.list_history(account=sample_store)) == 1


def test_rerun_picks_up_late_postings(snapshot_service, transaction_service, sample_store):
    _post(transaction_service, sample_store, "income", "500")
    snapshot_service.compute_snapshot(sample_store, DAY)
    _post(transaction_service, sample_store, "expense", "100")

    record = snapshot_service.compute_snapshot(sample_store, DAY)

    assert record.closing_balance == Decimal("400")
    assert len(snapshot_service.list_history(account=sample_store, on_date=DAY)) == 1


def test_snapshot_ignores_ledger(snapshot_service, ledger, sample_store):
    ledger.set_absolute(sample_store, Decimal("999"))

    record = snapshot_service.compute_snapshot(sample_store, DAY)

    assert record.closing_balance == Decimal("0")


def test_snapshot_requires_date(snapshot_service, sample_store):
    with pytest.raises(ValidationError, match="Date is required"):
        snapshot_service.compute_snapshot(sample_store, None)


def test_savings_and_store_histories_are_separate(
    snapshot_service, transaction_service, sample_store, sample_savings
):
    """Store 1 and savings account 1 share an id but not a history row."""
    _post(transaction_service, sample_store, "income", "10")
    _post(transaction_service, sample_savings, "income", "20")

    store_record = snapshot_service.compute_snapshot(sample_store, DAY)
    savings_record = snapshot_service.compute_snapshot(sample_savings, DAY)

    assert store_record.closing_balance == Decimal("10")
    assert savings_record.closing_balance == Decimal("20")
    assert len(snapshot_service.list_history(on_date=DAY)) == 2


def test_snapshot_all_active_stores(snapshot_service, account_service, transaction_service, sample_store):
    stopped_id = account_service.create_store(
        code="ST-009", branch="Closed", address="x", status=AccountStatus.STOPPED
    )
    _post(transaction_service, sample_store, "income", "75")

    records = snapshot_service.snapshot_all_active_stores(DAY)

    assert [r.account for r in records] == [sample_store]
    assert records[0].closing_balance == Decimal("75")
    assert all(r.account.id != stopped_id for r in snapshot_service.list_history())
