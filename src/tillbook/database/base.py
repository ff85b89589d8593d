"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from tillbook.domain.entities import (
    AccountRef,
    AccountStatus,
    BalanceEntry,
    DailyHistoryRecord,
    SavingsAccount,
    Store,
    TransactionKind,
    TransactionRecord,
    TransferRecord,
)


class Database(ABC):
    """Abstract persistence service for tillbook.

    Implementations raise ``DependencyError`` when the underlying store
    fails and ``ConflictError`` on uniqueness violations.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Store operations
    @abstractmethod
    def create_store(
        self,
        code: str,
        branch: str,
        address: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        status: AccountStatus = AccountStatus.ACTIVE,
    ) -> int:
        """Create a store. Returns store ID."""
        pass

    @abstractmethod
    def get_store(self, store_id: int) -> Optional[Store]:
        """Get store by ID."""
        pass

    @abstractmethod
    def get_store_by_code(self, code: str) -> Optional[Store]:
        """Get store by its external code."""
        pass

    @abstractmethod
    def list_stores(self, status: Optional[AccountStatus] = None) -> list[Store]:
        """List stores, optionally filtered by status."""
        pass

    # Savings account operations
    @abstractmethod
    def create_savings_account(
        self,
        code: str,
        name: str,
        account_type: str,
        bank_name: Optional[str] = None,
        account_number: Optional[str] = None,
        notes: Optional[str] = None,
        status: AccountStatus = AccountStatus.ACTIVE,
    ) -> int:
        """Create a savings account. Returns savings account ID."""
        pass

    @abstractmethod
    def get_savings_account(self, account_id: int) -> Optional[SavingsAccount]:
        """Get savings account by ID."""
        pass

    @abstractmethod
    def get_savings_account_by_code(self, code: str) -> Optional[SavingsAccount]:
        """Get savings account by its external code."""
        pass

    @abstractmethod
    def list_savings_accounts(self, status: Optional[AccountStatus] = None) -> list[SavingsAccount]:
        """List savings accounts, optionally filtered by status."""
        pass

    @abstractmethod
    def update_account_status(self, account: AccountRef, status: AccountStatus) -> None:
        """Set the lifecycle status of a store or savings account."""
        pass

    # Balance operations
    @abstractmethod
    def get_balance(self, account: AccountRef) -> Optional[BalanceEntry]:
        """Get the balance entry of an account, or None if it has none yet."""
        pass

    @abstractmethod
    def list_balances(self) -> list[BalanceEntry]:
        """List all balance entries."""
        pass

    @abstractmethod
    def increment_balance(self, account: AccountRef, delta: Decimal) -> Decimal:
        """Atomically add delta to an account balance. Returns the new balance.

        Creates the entry with ``current_balance = delta`` when absent.
        """
        pass

    @abstractmethod
    def set_balance(self, account: AccountRef, value: Decimal) -> Decimal:
        """Overwrite an account balance, creating the entry when absent."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        account: AccountRef,
        kind: TransactionKind,
        category: str,
        amount: Decimal,
        payment_method: str,
        transaction_date: date,
        notes: Optional[str] = None,
        staff_identity: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> TransactionRecord:
        """Insert a transaction and return the stored record."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account: Optional[AccountRef] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[TransactionKind] = None,
        reference: Optional[str] = None,
    ) -> list[TransactionRecord]:
        """List transactions with optional filters, newest first."""
        pass

    # Transfer operations
    @abstractmethod
    def create_transfer(
        self,
        reference: str,
        from_account: AccountRef,
        to_account: AccountRef,
        amount: Decimal,
        transaction_date: date,
        outgoing_transaction_id: int,
        incoming_transaction_id: int,
        notes: Optional[str] = None,
        staff_identity: Optional[str] = None,
    ) -> TransferRecord:
        """Insert a transfer record and return it."""
        pass

    @abstractmethod
    def get_transfer(self, reference: str) -> Optional[TransferRecord]:
        """Get transfer by reference."""
        pass

    @abstractmethod
    def list_transfers(self) -> list[TransferRecord]:
        """List transfers, newest first."""
        pass

    # History operations
    @abstractmethod
    def get_history(self, account: AccountRef, on_date: date) -> Optional[DailyHistoryRecord]:
        """Get the daily history record of an account for a date."""
        pass

    @abstractmethod
    def upsert_history(
        self,
        account: AccountRef,
        on_date: date,
        opening_balance: Decimal,
        closing_balance: Decimal,
        total_income: Decimal,
        total_expense: Decimal,
        total_transfer: Decimal,
        net_change: Decimal,
    ) -> DailyHistoryRecord:
        """Insert or overwrite the history record keyed by (account, date)."""
        pass

    @abstractmethod
    def list_history(
        self, account: Optional[AccountRef] = None, on_date: Optional[date] = None
    ) -> list[DailyHistoryRecord]:
        """List history records, newest date first."""
        pass
