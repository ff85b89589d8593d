"""Balance ledger: the current balance of every store and savings account."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from tillbook.database.base import Database
from tillbook.domain.entities import AccountRef, BalanceEntry, TransactionKind
from tillbook.domain.errors import ValidationError, amount_below_cents, missing_field

logger = logging.getLogger(__name__)

# Manual cash-balance postings accept the transaction kinds plus "adjustment"
ADJUSTMENT = "adjustment"

# Money columns are stored with two decimal places
CENTS = Decimal("0.01")


def parse_money(amount) -> Decimal:
    """Coerce an amount to Decimal, rejecting anything finer than a cent.

    Raises:
        ValidationError: If the amount is missing, not a number, or has
            more than two decimal places
    """
    if amount is None or amount == "":
        raise ValidationError(missing_field("Amount"))
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount '{amount}'") from None
    if not value.is_finite():
        raise ValidationError(f"Invalid amount '{amount}'")
    if value.quantize(CENTS) != value:
        raise ValidationError(amount_below_cents(amount))
    return value


def signed_amount(kind: TransactionKind, amount: Decimal) -> Decimal:
    """Return the balance delta of a posting.

    Income adds to the balance; expenses and transfers take away from it.
    """
    if kind is TransactionKind.INCOME:
        return amount
    return -amount


class BalanceLedger:
    """Reads and mutates balance entries.

    Account existence is not checked here; callers validate accounts
    before touching their balances.
    """

    def __init__(self, db: Database):
        """Initialize balance ledger.

        Args:
            db: Database instance
        """
        self.db = db

    def get_balance(self, account: AccountRef) -> Optional[BalanceEntry]:
        """Get the balance entry of an account, or None if it has none yet."""
        return self.db.get_balance(account)

    def current_balance(self, account: AccountRef) -> Decimal:
        """Return the current balance, treating a missing entry as zero."""
        entry = self.db.get_balance(account)
        return entry.current_balance if entry is not None else Decimal("0")

    def list_balances(self) -> list[BalanceEntry]:
        """List all balance entries."""
        return self.db.list_balances()

    def apply_delta(self, account: AccountRef, delta: Decimal) -> Decimal:
        """Add a signed delta to an account balance.

        The increment runs as one atomic statement in the persistence layer,
        so concurrent postings on the same account cannot lose updates. A
        missing entry is created holding ``delta``.

        Returns:
            The new balance
        """
        new_balance = self.db.increment_balance(account, Decimal(delta))
        logger.debug("Balance of %s moved by %s to %s", account, delta, new_balance)
        return new_balance

    def set_absolute(self, account: AccountRef, value: Decimal) -> Decimal:
        """Overwrite an account balance. Used for manual adjustments only.

        Returns:
            The new balance
        """
        new_balance = self.db.set_balance(account, Decimal(value))
        logger.info("Balance of %s set to %s", account, new_balance)
        return new_balance

    def post_adjustment(
        self, account: AccountRef, kind: Union[TransactionKind, str], amount: Decimal
    ) -> BalanceEntry:
        """Apply a manual cash-balance posting.

        Args:
            account: Account to adjust
            kind: "income" adds, "expense" and "transfer" subtract,
                "adjustment" overwrites the balance with ``amount``
            amount: Amount of the posting

        Returns:
            The updated balance entry

        Raises:
            ValidationError: If kind is unknown or amount is missing or
                finer than a cent
        """
        amount = parse_money(amount)

        if kind == ADJUSTMENT:
            self.set_absolute(account, amount)
        else:
            try:
                txn_kind = TransactionKind(kind)
            except ValueError:
                raise ValidationError(
                    f"Invalid balance posting type '{kind}'; expected income, expense, transfer or adjustment"
                ) from None
            self.apply_delta(account, signed_amount(txn_kind, amount))

        return self.db.get_balance(account)
