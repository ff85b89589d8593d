"""Daily cash history snapshots."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from tillbook.database.base import Database
from tillbook.domain.entities import (
    AccountRef,
    AccountStatus,
    DailyHistoryRecord,
    TransactionKind,
    TransactionRecord,
)
from tillbook.domain.errors import ValidationError, missing_field

logger = logging.getLogger(__name__)


def summarize_day(transactions: list[TransactionRecord]) -> dict[TransactionKind, Decimal]:
    """Total transaction amounts per kind."""
    totals = {kind: Decimal("0") for kind in TransactionKind}
    for txn in transactions:
        totals[txn.kind] += txn.amount
    return totals


class SnapshotService:
    """Service computing per-account daily history records."""

    def __init__(self, db: Database):
        """Initialize snapshot service.

        Args:
            db: Database instance
        """
        self.db = db

    def compute_snapshot(self, account: AccountRef, on_date: date) -> DailyHistoryRecord:
        """Recompute and store the history record of an account for one date.

        The opening balance is the stored closing balance of the previous
        calendar day (zero if there is none). Totals always come from the
        full set of transactions on ``on_date``, so running this repeatedly
        overwrites the record with the same values. Records of later days
        are not recomputed.

        Args:
            account: Store or savings account
            on_date: Calendar date to snapshot

        Returns:
            The stored DailyHistoryRecord
        """
        if on_date is None:
            raise ValidationError(missing_field("Date"))

        previous = self.db.get_history(account, on_date - timedelta(days=1))
        opening_balance = previous.closing_balance if previous is not None else Decimal("0")

        transactions = self.db.list_transactions(account=account, start_date=on_date, end_date=on_date)
        totals = summarize_day(transactions)
        total_income = totals[TransactionKind.INCOME]
        total_expense = totals[TransactionKind.EXPENSE]
        total_transfer = totals[TransactionKind.TRANSFER]

        net_change = total_income - total_expense - total_transfer
        closing_balance = opening_balance + net_change

        record = self.db.upsert_history(
            account=account,
            on_date=on_date,
            opening_balance=opening_balance,
            closing_balance=closing_balance,
            total_income=total_income,
            total_expense=total_expense,
            total_transfer=total_transfer,
            net_change=net_change,
        )
        logger.info(
            "Snapshot %s on %s: opening %s, net %s, closing %s (%d transactions)",
            account,
            on_date,
            opening_balance,
            net_change,
            closing_balance,
            len(transactions),
        )
        return record

    def snapshot_all_active_stores(self, on_date: date) -> list[DailyHistoryRecord]:
        """Compute the snapshot of every active store for one date."""
        stores = self.db.list_stores(status=AccountStatus.ACTIVE)
        records = [self.compute_snapshot(store.ref, on_date) for store in stores]
        logger.info("Created %d store snapshots for %s", len(records), on_date)
        return records

    def list_history(
        self, account: Optional[AccountRef] = None, on_date: Optional[date] = None
    ) -> list[DailyHistoryRecord]:
        """List stored history records, newest date first."""
        return self.db.list_history(account=account, on_date=on_date)
