"""Tests for the fund transfer workflow."""

import logging
import re
from decimal import Decimal

import pytest

from tillbook.domain.balance import BalanceLedger
from tillbook.domain.entities import (
    AccountRef,
    AccountStatus,
    TransactionKind,
    TRANSFER_IN_CATEGORY,
    TRANSFER_OUT_CATEGORY,
    TRANSFER_PAYMENT_METHOD,
)
from tillbook.domain.errors import DependencyError, NotFoundError, ValidationError
from tillbook.domain.transfer import (
    TransferFailedError,
    TransferService,
    TransferStage,
    generate_reference,
)

REFERENCE_PATTERN = re.compile(r"^TRF-\d{13}-[0-9a-z]{9}$")


def test_generate_reference_format():
    references = {generate_reference() for _ in range(50)}
    assert all(REFERENCE_PATTERN.match(ref) for ref in references)
    assert len(references) == 50


class TestSuccessfulTransfer:
    def test_store_to_savings(self, transfer_service, ledger, funded_accounts):
        """Store 100 / savings 50, transfer 30 -> store 70 / savings 80."""
        store, savings = funded_accounts

        result = transfer_service.transfer(store, savings, Decimal("30"), notes="weekly", staff_identity="alice")

        assert result.balances_synced
        assert REFERENCE_PATTERN.match(result.reference)
        assert ledger.current_balance(store) == Decimal("70")
        assert ledger.current_balance(savings) == Decimal("80")

    def test_legs(self, transfer_service, funded_accounts):
        store, savings = funded_accounts

        result = transfer_service.transfer(store, savings, "30", notes="weekly")
        out_leg, in_leg = result.outgoing_transaction, result.incoming_transaction

        assert out_leg.account == store
        assert out_leg.kind is TransactionKind.EXPENSE
        assert out_leg.category == TRANSFER_OUT_CATEGORY
        assert out_leg.notes == "Transfer out to Savings Account: weekly"
        assert in_leg.account == savings
        assert in_leg.kind is TransactionKind.INCOME
        assert in_leg.category == TRANSFER_IN_CATEGORY
        assert in_leg.notes == "Transfer in from Store: weekly"
        assert out_leg.amount == in_leg.amount == Decimal("30")
        assert out_leg.payment_method == in_leg.payment_method == TRANSFER_PAYMENT_METHOD
        assert out_leg.reference == in_leg.reference == result.reference
        assert out_leg.transaction_date == in_leg.transaction_date

    def test_record_links_both_legs(self, transfer_service, transaction_service, funded_accounts):
        store, savings = funded_accounts

        result = transfer_service.transfer(store, savings, "30")
        record = transfer_service.get_transfer(result.reference)

        assert record.from_account == store
        assert record.to_account == savings
        assert record.amount == Decimal("30")
        assert record.outgoing_transaction_id == result.outgoing_transaction.id
        assert record.incoming_transaction_id == result.incoming_transaction.id
        legs = transaction_service.list_transactions(reference=result.reference)
        assert {t.id for t in legs} == {record.outgoing_transaction_id, record.incoming_transaction_id}

    def test_savings_to_store(self, transfer_service, ledger, funded_accounts):
        store, savings = funded_accounts

        result = transfer_service.transfer(savings, store, "20")

        assert result.outgoing_transaction.notes == "Transfer out to Store: "
        assert result.incoming_transaction.notes == "Transfer in from Savings Account: "
        assert ledger.current_balance(savings) == Decimal("30")
        assert ledger.current_balance(store) == Decimal("120")

    def test_overdraft_allowed_by_default(self, transfer_service, ledger, funded_accounts):
        store, savings = funded_accounts

        transfer_service.transfer(store, savings, "150")

        assert ledger.current_balance(store) == Decimal("-50")

    def test_list_transfers_newest_first(self, transfer_service, funded_accounts):
        store, savings = funded_accounts
        first = transfer_service.transfer(store, savings, "1")
        second = transfer_service.transfer(savings, store, "2")

        assert [t.reference for t in transfer_service.list_transfers()] == [second.reference, first.reference]


class TestRejectedTransfer:
    def test_same_account(self, transfer_service, transaction_service, funded_accounts):
        store, _ = funded_accounts
        with pytest.raises(ValidationError, match="Cannot transfer to the same account"):
            transfer_service.transfer(store, store, "10")
        assert transaction_service.list_transactions() == []

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_non_positive_amount(self, transfer_service, funded_accounts, amount):
        store, savings = funded_accounts
        with pytest.raises(ValidationError, match="greater than zero"):
            transfer_service.transfer(store, savings, amount)

    @pytest.mark.parametrize("amount", ["0.004", "10.005"])
    def test_sub_cent_amount(self, transfer_service, transaction_service, ledger, funded_accounts, amount):
        store, savings = funded_accounts
        with pytest.raises(ValidationError, match="at most two decimal places"):
            transfer_service.transfer(store, savings, amount)

        assert transaction_service.list_transactions() == []
        assert transfer_service.list_transfers() == []
        assert ledger.current_balance(store) == Decimal("100")
        assert ledger.current_balance(savings) == Decimal("50")

    def test_missing_account(self, transfer_service, sample_store):
        with pytest.raises(NotFoundError, match="Savings Account 9 not found"):
            transfer_service.transfer(sample_store, AccountRef.savings(9), "10")

    def test_inactive_account(self, transfer_service, account_service, funded_accounts):
        store, savings = funded_accounts
        account_service.set_status(savings, AccountStatus.INACTIVE)
        with pytest.raises(ValidationError, match="is inactive"):
            transfer_service.transfer(store, savings, "10")

    def test_overdraft_blocked(self, temp_db, transaction_service, funded_accounts):
        store, savings = funded_accounts
        service = TransferService(temp_db, block_overdraft=True)

        with pytest.raises(ValidationError, match="exceeds available balance"):
            service.transfer(store, savings, "100.01")
        assert transaction_service.list_transactions() == []

        # The full balance may still move
        assert service.transfer(store, savings, "100").balances_synced

    def test_get_unknown_transfer(self, transfer_service):
        with pytest.raises(NotFoundError, match="TRF-0-missing"):
            transfer_service.get_transfer("TRF-0-missing")


class TestFailedSteps:
    def _assert_nothing_written(self, temp_db, store, savings):
        assert temp_db.list_transactions() == []
        assert temp_db.list_transfers() == []
        ledger = BalanceLedger(temp_db)
        assert ledger.current_balance(store) == Decimal("100")
        assert ledger.current_balance(savings) == Decimal("50")

    def test_outgoing_leg_fails(self, temp_db, flaky_db, funded_accounts):
        store, savings = funded_accounts
        service = TransferService(flaky_db("create_transaction", fail_on_call=1))

        with pytest.raises(TransferFailedError, match="Failed to create outgoing transaction") as excinfo:
            service.transfer(store, savings, "30")

        assert excinfo.value.stage is TransferStage.STARTED
        self._assert_nothing_written(temp_db, store, savings)

    def test_incoming_leg_fails_removes_outgoing(self, temp_db, flaky_db, funded_accounts, caplog):
        store, savings = funded_accounts
        service = TransferService(flaky_db("create_transaction", fail_on_call=2))

        with caplog.at_level(logging.WARNING):
            with pytest.raises(TransferFailedError, match="Failed to create incoming transaction") as excinfo:
                service.transfer(store, savings, "30")

        assert excinfo.value.stage is TransferStage.OUTGOING_POSTED
        assert isinstance(excinfo.value, DependencyError)
        assert "rolled back transaction" in caplog.text
        self._assert_nothing_written(temp_db, store, savings)

    def test_record_fails_removes_both_legs(self, temp_db, flaky_db, funded_accounts):
        store, savings = funded_accounts
        service = TransferService(flaky_db("create_transfer"))

        with pytest.raises(TransferFailedError, match="Failed to create transfer record") as excinfo:
            service.transfer(store, savings, "30")

        assert excinfo.value.stage is TransferStage.INCOMING_POSTED
        self._assert_nothing_written(temp_db, store, savings)

    def test_failed_compensation_is_logged(self, temp_db, flaky_db, funded_accounts, caplog, monkeypatch):
        """The original error still surfaces when a leg cannot be removed."""
        store, savings = funded_accounts
        db = flaky_db("create_transfer")

        def refuse_delete(transaction_id):
            raise DependencyError("delete refused")

        monkeypatch.setattr(db, "delete_transaction", refuse_delete)
        service = TransferService(db)

        with caplog.at_level(logging.ERROR):
            with pytest.raises(TransferFailedError, match="Failed to create transfer record"):
                service.transfer(store, savings, "30")

        assert "remove it by hand" in caplog.text
        assert len(temp_db.list_transactions()) == 2
        assert temp_db.list_transfers() == []

    def test_balance_failure_is_not_compensated(self, temp_db, flaky_db, funded_accounts, caplog):
        """A transfer whose balance update fails stays committed and reports drift."""
        store, savings = funded_accounts
        service = TransferService(flaky_db("increment_balance", fail_on_call=1))

        with caplog.at_level(logging.WARNING):
            result = service.transfer(store, savings, "30")

        assert result.balances_synced is False
        assert "Balance drift" in caplog.text
        assert temp_db.get_transfer(result.reference) is not None
        assert len(temp_db.list_transactions(reference=result.reference)) == 2
        ledger = BalanceLedger(temp_db)
        # Source update failed; destination was still credited
        assert ledger.current_balance(store) == Decimal("100")
        assert ledger.current_balance(savings) == Decimal("80")
