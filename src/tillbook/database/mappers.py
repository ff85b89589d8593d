"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the translation between
the two nullable account foreign keys used in the schema and the typed
``AccountRef`` used by the domain.
"""

from typing import Optional

from tillbook.domain import entities as domain
from tillbook.database.models import (
    Store as ORMStore,
    SavingsAccount as ORMSavingsAccount,
    BalanceEntry as ORMBalanceEntry,
    Transaction as ORMTransaction,
    Transfer as ORMTransfer,
    CashHistory as ORMCashHistory,
)


def account_columns(ref: domain.AccountRef) -> dict[str, Optional[int]]:
    """Return the (store_id, savings_account_id) column values for a reference."""
    return {
        "store_id": ref.id if ref.is_store else None,
        "savings_account_id": None if ref.is_store else ref.id,
    }


def account_ref_from_columns(store_id: Optional[int], savings_account_id: Optional[int]) -> domain.AccountRef:
    """Convert the polymorphic account columns back into a reference."""
    if store_id is not None:
        return domain.AccountRef.store(store_id)
    return domain.AccountRef.savings(savings_account_id)


def store_to_domain(orm_store: ORMStore) -> domain.Store:
    """Convert SQLAlchemy Store model to domain Store entity."""
    return domain.Store(
        id=orm_store.id,
        code=orm_store.code,
        branch=orm_store.branch,
        address=orm_store.address,
        phone=orm_store.phone,
        email=orm_store.email,
        status=domain.AccountStatus(orm_store.status),
        created_at=orm_store.created_at,
    )


def savings_account_to_domain(orm_account: ORMSavingsAccount) -> domain.SavingsAccount:
    """Convert SQLAlchemy SavingsAccount model to domain SavingsAccount entity."""
    return domain.SavingsAccount(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=orm_account.account_type,
        bank_name=orm_account.bank_name,
        account_number=orm_account.account_number,
        status=domain.AccountStatus(orm_account.status),
        notes=orm_account.notes,
        created_at=orm_account.created_at,
    )


def balance_to_domain(orm_balance: ORMBalanceEntry) -> domain.BalanceEntry:
    """Convert SQLAlchemy BalanceEntry model to domain BalanceEntry entity."""
    return domain.BalanceEntry(
        id=orm_balance.id,
        account=account_ref_from_columns(orm_balance.store_id, orm_balance.savings_account_id),
        current_balance=orm_balance.current_balance,
        last_updated=orm_balance.last_updated,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.TransactionRecord:
    """Convert SQLAlchemy Transaction model to domain TransactionRecord entity."""
    return domain.TransactionRecord(
        id=orm_transaction.id,
        account=account_ref_from_columns(orm_transaction.store_id, orm_transaction.savings_account_id),
        kind=domain.TransactionKind(orm_transaction.kind),
        category=orm_transaction.category,
        amount=orm_transaction.amount,
        payment_method=orm_transaction.payment_method,
        notes=orm_transaction.notes,
        transaction_date=orm_transaction.transaction_date,
        staff_identity=orm_transaction.staff_identity,
        reference=orm_transaction.reference,
        created_at=orm_transaction.created_at,
    )


def transfer_to_domain(orm_transfer: ORMTransfer) -> domain.TransferRecord:
    """Convert SQLAlchemy Transfer model to domain TransferRecord entity."""
    return domain.TransferRecord(
        id=orm_transfer.id,
        reference=orm_transfer.reference,
        from_account=domain.AccountRef.parse(orm_transfer.from_type, orm_transfer.from_id),
        to_account=domain.AccountRef.parse(orm_transfer.to_type, orm_transfer.to_id),
        amount=orm_transfer.amount,
        notes=orm_transfer.notes,
        transaction_date=orm_transfer.transaction_date,
        staff_identity=orm_transfer.staff_identity,
        outgoing_transaction_id=orm_transfer.outgoing_transaction_id,
        incoming_transaction_id=orm_transfer.incoming_transaction_id,
        created_at=orm_transfer.created_at,
    )


def history_to_domain(orm_history: ORMCashHistory) -> domain.DailyHistoryRecord:
    """Convert SQLAlchemy CashHistory model to domain DailyHistoryRecord entity."""
    return domain.DailyHistoryRecord(
        id=orm_history.id,
        account=account_ref_from_columns(orm_history.store_id, orm_history.savings_account_id),
        date=orm_history.date,
        opening_balance=orm_history.opening_balance,
        closing_balance=orm_history.closing_balance,
        total_income=orm_history.total_income,
        total_expense=orm_history.total_expense,
        total_transfer=orm_history.total_transfer,
        net_change=orm_history.net_change,
        created_at=orm_history.created_at,
    )
