"""Transaction log domain service."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from tillbook.database.base import Database
from tillbook.domain.account import AccountService
from tillbook.domain.balance import CENTS, BalanceLedger, signed_amount
from tillbook.domain.entities import AccountRef, TransactionKind, TransactionRecord
from tillbook.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    amount_below_cents,
    amount_not_positive,
    missing_field,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


def parse_kind(kind: Union[TransactionKind, str, None]) -> TransactionKind:
    """Coerce a transaction kind, rejecting missing or unknown values."""
    if kind is None or kind == "":
        raise ValidationError(missing_field("Type"))
    try:
        return TransactionKind(kind)
    except ValueError:
        raise ValidationError(
            f"Invalid transaction type '{kind}'; expected income, expense or transfer"
        ) from None


def parse_positive_amount(amount) -> Decimal:
    """Coerce an amount to Decimal and require it to be a positive number of cents."""
    if amount is None or amount == "":
        raise ValidationError(missing_field("Amount"))
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount '{amount}'") from None
    if not value.is_finite() or value <= 0:
        raise ValidationError(amount_not_positive(amount))
    if value.quantize(CENTS) != value:
        raise ValidationError(amount_below_cents(amount))
    return value


class TransactionService:
    """Service for posting to and reading the transaction log."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.accounts = AccountService(db)
        self.ledger = BalanceLedger(db)

    def post_transaction(
        self,
        account: Optional[AccountRef],
        kind: Union[TransactionKind, str, None],
        category: Optional[str],
        amount,
        payment_method: Optional[str],
        notes: Optional[str] = None,
        transaction_date: Optional[date] = None,
        staff_identity: Optional[str] = None,
    ) -> TransactionRecord:
        """Insert a transaction without touching any balance.

        Args:
            account: Store or savings account the posting belongs to
            kind: income, expense or transfer
            category: Category name (e.g. "sales", "rent")
            amount: Positive amount
            payment_method: Payment method (e.g. "cash", "online")
            notes: Optional notes
            transaction_date: Posting date, defaults to today
            staff_identity: Identity of the staff member posting

        Returns:
            The stored transaction record

        Raises:
            ValidationError: If a required field is missing or invalid, or the
                account is not active
            NotFoundError: If the account doesn't exist
            DependencyError: If the insert fails
        """
        if account is None:
            raise ValidationError(missing_field("Account"))
        txn_kind = parse_kind(kind)
        if category is None or not category.strip():
            raise ValidationError(missing_field("Category"))
        value = parse_positive_amount(amount)
        if payment_method is None or not payment_method.strip():
            raise ValidationError(missing_field("Payment method"))

        self.accounts.require_active(account)

        record = self.db.create_transaction(
            account=account,
            kind=txn_kind,
            category=category.strip(),
            amount=value,
            payment_method=payment_method.strip(),
            transaction_date=transaction_date or date.today(),
            notes=notes,
            staff_identity=staff_identity,
        )
        logger.info(
            "Posted %s %s of %s on %s (transaction %s)",
            record.kind.value,
            record.category,
            record.amount,
            account,
            record.id,
        )
        return record

    def post_simple_transaction(
        self,
        account: Optional[AccountRef],
        kind: Union[TransactionKind, str, None],
        category: Optional[str],
        amount,
        payment_method: Optional[str],
        notes: Optional[str] = None,
        transaction_date: Optional[date] = None,
        staff_identity: Optional[str] = None,
    ) -> TransactionRecord:
        """Insert a transaction, then sync the account balance.

        Takes the same arguments as ``post_transaction``. The balance sync is
        best effort: the transaction is already committed when it runs, so
        a failure is logged as drift and the posting still succeeds.
        """
        record = self.post_transaction(
            account,
            kind,
            category,
            amount,
            payment_method,
            notes=notes,
            transaction_date=transaction_date,
            staff_identity=staff_identity,
        )
        delta = signed_amount(record.kind, record.amount)
        try:
            self.ledger.apply_delta(record.account, delta)
        except DomainError as e:
            logger.warning(
                "Balance drift: transaction %s committed but balance of %s was not moved by %s: %s",
                record.id,
                record.account,
                delta,
                e,
            )
        return record

    def get_transaction(self, transaction_id: int) -> TransactionRecord:
        """Get transaction by ID.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        record = self.db.get_transaction(transaction_id)
        if record is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return record

    def list_transactions(
        self,
        account: Optional[AccountRef] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[TransactionKind] = None,
        reference: Optional[str] = None,
    ) -> list[TransactionRecord]:
        """List transactions with filters, newest first."""
        return self.db.list_transactions(
            account=account,
            start_date=start_date,
            end_date=end_date,
            kind=kind,
            reference=reference,
        )
