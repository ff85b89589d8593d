"""
Request and response schemas (Pydantic)

Decimal amounts are serialised as strings so clients never see binary
floating point values.
"""

from datetime import date as date_type, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from tillbook.domain.entities import (
    BalanceEntry,
    DailyHistoryRecord,
    TransactionRecord,
    TransferRecord,
    TransferResult,
)


def _money(value: Decimal) -> str:
    return str(value)


# =========================================================================
# Requests
# =========================================================================


class TransferCreateRequest(BaseModel):
    """Transfer request"""

    model_config = ConfigDict(populate_by_name=True)

    from_type: str = Field(..., alias="fromType", description="Source account type (store/savings)")
    from_id: int = Field(..., alias="fromId", description="Source account ID")
    to_type: str = Field(..., alias="toType", description="Destination account type (store/savings)")
    to_id: int = Field(..., alias="toId", description="Destination account ID")
    amount: Decimal = Field(..., description="Positive amount to move")
    notes: str | None = Field(default=None, description="Free-text notes")
    staff_identity: str | None = Field(default=None, description="Staff member requesting the transfer")


class TransactionCreateRequest(BaseModel):
    """Transaction posting request"""

    account_type: str = Field(..., description="Account type (store/savings)")
    account_id: int = Field(..., description="Account ID")
    kind: str = Field(..., description="income, expense or transfer")
    category: str = Field(..., description="Category (e.g. sales, rent)")
    amount: Decimal = Field(..., description="Positive amount")
    payment_method: str = Field(default="cash", description="Payment method (cash/online)")
    notes: str | None = None
    transaction_date: date_type | None = Field(default=None, description="Posting date, defaults to today")
    staff_identity: str | None = None


class CashBalanceRequest(BaseModel):
    """Manual cash balance posting"""

    account_type: str = Field(..., description="Account type (store/savings)")
    account_id: int = Field(..., description="Account ID")
    kind: str = Field(..., description="income, expense, transfer or adjustment")
    amount: Decimal = Field(..., description="Amount of the posting")


class CashHistoryRequest(BaseModel):
    """Daily snapshot request"""

    account_type: str = Field(default="store", description="Account type (store/savings)")
    account_id: int = Field(..., description="Account ID")
    date: date_type | None = Field(default=None, description="Date to snapshot, defaults to today")


# =========================================================================
# Responses
# =========================================================================


class TransactionResponse(BaseModel):
    """Transaction log row"""

    id: int
    account_type: str
    account_id: int
    kind: str
    category: str
    amount: str
    payment_method: str
    notes: str | None
    transaction_date: date_type
    staff_identity: str | None
    reference: str | None
    created_at: datetime | None

    @classmethod
    def from_domain(cls, record: TransactionRecord) -> "TransactionResponse":
        return cls(
            id=record.id,
            account_type=record.account.kind.value,
            account_id=record.account.id,
            kind=record.kind.value,
            category=record.category,
            amount=_money(record.amount),
            payment_method=record.payment_method,
            notes=record.notes,
            transaction_date=record.transaction_date,
            staff_identity=record.staff_identity,
            reference=record.reference,
            created_at=record.created_at,
        )


class TransferResponse(BaseModel):
    """Stored transfer record"""

    id: int
    reference: str
    from_type: str
    from_id: int
    to_type: str
    to_id: int
    amount: str
    notes: str | None
    transaction_date: date_type
    staff_identity: str | None
    outgoing_transaction_id: int
    incoming_transaction_id: int
    created_at: datetime | None

    @classmethod
    def from_domain(cls, record: TransferRecord) -> "TransferResponse":
        return cls(
            id=record.id,
            reference=record.reference,
            from_type=record.from_account.kind.value,
            from_id=record.from_account.id,
            to_type=record.to_account.kind.value,
            to_id=record.to_account.id,
            amount=_money(record.amount),
            notes=record.notes,
            transaction_date=record.transaction_date,
            staff_identity=record.staff_identity,
            outgoing_transaction_id=record.outgoing_transaction_id,
            incoming_transaction_id=record.incoming_transaction_id,
            created_at=record.created_at,
        )


class TransferResultResponse(BaseModel):
    """Completed transfer

    ``balancesSynced`` is False when the transfer was committed but one of
    the balance updates failed.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    transfer_reference: str = Field(..., alias="transferReference")
    outgoing_transaction: TransactionResponse = Field(..., alias="outgoingTransaction")
    incoming_transaction: TransactionResponse = Field(..., alias="incomingTransaction")
    transfer_record: TransferResponse = Field(..., alias="transferRecord")
    balances_synced: bool = Field(..., alias="balancesSynced")

    @classmethod
    def from_domain(cls, result: TransferResult) -> "TransferResultResponse":
        return cls(
            transfer_reference=result.reference,
            outgoing_transaction=TransactionResponse.from_domain(result.outgoing_transaction),
            incoming_transaction=TransactionResponse.from_domain(result.incoming_transaction),
            transfer_record=TransferResponse.from_domain(result.transfer),
            balances_synced=result.balances_synced,
        )


class BalanceResponse(BaseModel):
    """Balance ledger entry"""

    account_type: str
    account_id: int
    current_balance: str
    last_updated: datetime | None

    @classmethod
    def from_domain(cls, entry: BalanceEntry) -> "BalanceResponse":
        return cls(
            account_type=entry.account.kind.value,
            account_id=entry.account.id,
            current_balance=_money(entry.current_balance),
            last_updated=entry.last_updated,
        )


class HistoryResponse(BaseModel):
    """Daily cash history record"""

    id: int
    account_type: str
    account_id: int
    date: date_type
    opening_balance: str
    closing_balance: str
    total_income: str
    total_expense: str
    total_transfer: str
    net_change: str
    created_at: datetime | None

    @classmethod
    def from_domain(cls, record: DailyHistoryRecord) -> "HistoryResponse":
        return cls(
            id=record.id,
            account_type=record.account.kind.value,
            account_id=record.account.id,
            date=record.date,
            opening_balance=_money(record.opening_balance),
            closing_balance=_money(record.closing_balance),
            total_income=_money(record.total_income),
            total_expense=_money(record.total_expense),
            total_transfer=_money(record.total_transfer),
            net_change=_money(record.net_change),
            created_at=record.created_at,
        )


class HealthResponse(BaseModel):
    """Health check"""

    status: str = Field(default="ok", description="Service status")
    version: str = Field(..., description="Package version")


class ErrorResponse(BaseModel):
    """Error body shared by every failing request"""

    error: str
