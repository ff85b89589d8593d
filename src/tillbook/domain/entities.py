"""Domain model entities for tillbook.

These are pure data classes representing business concepts, independent of
database schema. Stores and savings accounts share one balance ledger and
one transaction log, so every posting addresses its account through an
``AccountRef`` rather than a pair of loosely typed columns.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from tillbook.domain.errors import ValidationError


class AccountKind(str, Enum):
    """The two kinds of funding source a posting can target."""

    STORE = "store"
    SAVINGS = "savings"


class AccountStatus(str, Enum):
    """Account lifecycle. Only active accounts take new postings."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    STOPPED = "stopped"


class TransactionKind(str, Enum):
    """Kind of a transaction log posting."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


# Categories and payment method stamped on transfer legs
TRANSFER_OUT_CATEGORY = "transfer_out"
TRANSFER_IN_CATEGORY = "transfer_in"
TRANSFER_PAYMENT_METHOD = "transfer"


@dataclass(frozen=True)
class AccountRef:
    """Typed reference to a store or a savings account.

    Build instances with ``AccountRef.store``, ``AccountRef.savings`` or
    ``AccountRef.parse``; all three reject unknown kinds and bad ids.
    """

    kind: AccountKind
    id: int

    def __post_init__(self):
        if not isinstance(self.kind, AccountKind):
            raise ValidationError(f"Invalid account type '{self.kind}'")
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id <= 0:
            raise ValidationError(f"Invalid account id '{self.id}'")

    @classmethod
    def store(cls, account_id: int) -> "AccountRef":
        return cls(AccountKind.STORE, account_id)

    @classmethod
    def savings(cls, account_id: int) -> "AccountRef":
        return cls(AccountKind.SAVINGS, account_id)

    @classmethod
    def parse(cls, kind: str, account_id) -> "AccountRef":
        """Build a reference from untyped input such as a request body.

        Raises:
            ValidationError: If the kind is not 'store' or 'savings' or the id
                is not a positive integer
        """
        try:
            account_kind = AccountKind(kind)
        except ValueError:
            raise ValidationError(f"Invalid account type '{kind}'") from None
        try:
            parsed_id = int(account_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid account id '{account_id}'") from None
        return cls(account_kind, parsed_id)

    @property
    def is_store(self) -> bool:
        return self.kind is AccountKind.STORE

    @property
    def label(self) -> str:
        """Human readable kind name used in messages and leg notes."""
        return "Store" if self.is_store else "Savings Account"

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


@dataclass(frozen=True)
class Store:
    """Store (branch) entity whose cash position is tracked."""

    id: int
    code: str
    branch: str
    address: str
    phone: Optional[str]
    email: Optional[str]
    status: AccountStatus
    created_at: datetime

    @property
    def ref(self) -> AccountRef:
        return AccountRef.store(self.id)

    @property
    def display_name(self) -> str:
        return self.branch


@dataclass(frozen=True)
class SavingsAccount:
    """Savings account entity."""

    id: int
    code: str
    name: str
    account_type: str
    bank_name: Optional[str]
    account_number: Optional[str]
    status: AccountStatus
    notes: Optional[str]
    created_at: datetime

    @property
    def ref(self) -> AccountRef:
        return AccountRef.savings(self.id)

    @property
    def display_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class BalanceEntry:
    """Current balance of one account."""

    id: int
    account: AccountRef
    current_balance: Decimal
    last_updated: datetime


@dataclass(frozen=True)
class TransactionRecord:
    """A single posting against one account."""

    id: int
    account: AccountRef
    kind: TransactionKind
    category: str
    amount: Decimal
    payment_method: str
    notes: Optional[str]
    transaction_date: date
    staff_identity: Optional[str]
    reference: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class TransferRecord:
    """Record linking the two legs of a fund transfer."""

    id: int
    reference: str
    from_account: AccountRef
    to_account: AccountRef
    amount: Decimal
    notes: Optional[str]
    transaction_date: date
    staff_identity: Optional[str]
    outgoing_transaction_id: int
    incoming_transaction_id: int
    created_at: datetime


@dataclass(frozen=True)
class TransferResult:
    """Outcome of a completed transfer.

    ``balances_synced`` is False when the transfer committed but one of the
    balance updates failed, leaving the ledger to be reconciled by hand.
    """

    reference: str
    outgoing_transaction: TransactionRecord
    incoming_transaction: TransactionRecord
    transfer: TransferRecord
    balances_synced: bool = True


@dataclass(frozen=True)
class DailyHistoryRecord:
    """Opening/closing balance and daily totals for one account and date."""

    id: int
    account: AccountRef
    date: date
    opening_balance: Decimal
    closing_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    total_transfer: Decimal
    net_change: Decimal
    created_at: datetime
