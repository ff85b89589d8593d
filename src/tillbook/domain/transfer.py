"""Fund transfers between stores and savings accounts.

A transfer is written as a chain of dependent inserts with no surrounding
database transaction:

    Started -> OutgoingPosted -> IncomingPosted -> RecordCreated -> BalancesUpdated

A failure while posting the incoming leg or the transfer record deletes the
legs already written, so the attempt leaves nothing behind. A failure while
updating balances is not compensated: the transfer stays committed and the
ledger drifts until someone reconciles it.
"""

import logging
import secrets
import string
import time
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from tillbook.database.base import Database
from tillbook.domain.account import AccountService
from tillbook.domain.balance import BalanceLedger
from tillbook.domain.entities import (
    AccountRef,
    TransactionKind,
    TransferRecord,
    TransferResult,
    TRANSFER_IN_CATEGORY,
    TRANSFER_OUT_CATEGORY,
    TRANSFER_PAYMENT_METHOD,
)
from tillbook.domain.errors import (
    DependencyError,
    DomainError,
    NotFoundError,
    ValidationError,
    insufficient_funds,
    transfer_not_found,
)
from tillbook.domain.transaction import parse_positive_amount

logger = logging.getLogger(__name__)

REFERENCE_ALPHABET = string.digits + string.ascii_lowercase


class TransferStage(str, Enum):
    """Steps of a transfer attempt, in the order they run."""

    STARTED = "started"
    OUTGOING_POSTED = "outgoing_posted"
    INCOMING_POSTED = "incoming_posted"
    RECORD_CREATED = "record_created"
    BALANCES_UPDATED = "balances_updated"


class TransferFailedError(DependencyError):
    """A transfer step failed and the attempt was rolled back.

    Attributes:
        stage: Last stage the attempt reached before the failing step
    """

    def __init__(self, message: str, stage: TransferStage):
        super().__init__(message)
        self.stage = stage


def generate_reference() -> str:
    """Return a transfer reference such as ``TRF-1704441600000-k3j9x0a2b``."""
    suffix = "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(9))
    return f"TRF-{int(time.time() * 1000)}-{suffix}"


class TransferService:
    """Service orchestrating transfers across the transaction log and balances."""

    def __init__(self, db: Database, block_overdraft: bool = False):
        """Initialize transfer service.

        Args:
            db: Database instance
            block_overdraft: If True, reject transfers larger than the current
                balance of the source account
        """
        self.db = db
        self.block_overdraft = block_overdraft
        self.accounts = AccountService(db)
        self.ledger = BalanceLedger(db)

    def transfer(
        self,
        from_account: AccountRef,
        to_account: AccountRef,
        amount,
        notes: Optional[str] = None,
        staff_identity: Optional[str] = None,
    ) -> TransferResult:
        """Move funds from one account to another.

        Args:
            from_account: Account the funds leave
            to_account: Account the funds arrive at
            amount: Positive amount to move
            notes: Optional free-text notes
            staff_identity: Identity of the staff member requesting the transfer

        Returns:
            TransferResult with both legs and the transfer record

        Raises:
            ValidationError: If the amount is not positive, both sides are the
                same account, an account is not active, or the transfer would
                overdraw the source while overdrafts are blocked
            NotFoundError: If either account doesn't exist
            TransferFailedError: If a leg or the transfer record could not be
                written; legs already written have been deleted
        """
        value = parse_positive_amount(amount)
        if from_account == to_account:
            raise ValidationError("Cannot transfer to the same account")
        self.accounts.require_active(from_account)
        self.accounts.require_active(to_account)
        if self.block_overdraft:
            self._check_available(from_account, value)

        reference = generate_reference()
        transaction_date = date.today()
        note_text = notes or ""
        stage = TransferStage.STARTED
        logger.info("Transfer %s: %s %s -> %s", reference, value, from_account, to_account)

        try:
            outgoing = self.db.create_transaction(
                account=from_account,
                kind=TransactionKind.EXPENSE,
                category=TRANSFER_OUT_CATEGORY,
                amount=value,
                payment_method=TRANSFER_PAYMENT_METHOD,
                transaction_date=transaction_date,
                notes=f"Transfer out to {to_account.label}: {note_text}",
                staff_identity=staff_identity,
                reference=reference,
            )
        except DomainError as e:
            logger.error("Transfer %s: outgoing transaction failed: %s", reference, e)
            raise TransferFailedError("Failed to create outgoing transaction", stage) from e
        stage = TransferStage.OUTGOING_POSTED

        try:
            incoming = self.db.create_transaction(
                account=to_account,
                kind=TransactionKind.INCOME,
                category=TRANSFER_IN_CATEGORY,
                amount=value,
                payment_method=TRANSFER_PAYMENT_METHOD,
                transaction_date=transaction_date,
                notes=f"Transfer in from {from_account.label}: {note_text}",
                staff_identity=staff_identity,
                reference=reference,
            )
        except DomainError as e:
            logger.error("Transfer %s: incoming transaction failed: %s", reference, e)
            self._compensate(reference, [outgoing.id])
            raise TransferFailedError("Failed to create incoming transaction", stage) from e
        stage = TransferStage.INCOMING_POSTED

        try:
            record = self.db.create_transfer(
                reference=reference,
                from_account=from_account,
                to_account=to_account,
                amount=value,
                transaction_date=transaction_date,
                outgoing_transaction_id=outgoing.id,
                incoming_transaction_id=incoming.id,
                notes=notes,
                staff_identity=staff_identity,
            )
        except DomainError as e:
            logger.error("Transfer %s: transfer record failed: %s", reference, e)
            self._compensate(reference, [outgoing.id, incoming.id])
            raise TransferFailedError("Failed to create transfer record", stage) from e
        stage = TransferStage.RECORD_CREATED

        balances_synced = self._update_balances(reference, from_account, to_account, value)
        if balances_synced:
            stage = TransferStage.BALANCES_UPDATED

        logger.info(
            "Transfer %s completed at stage %s (outgoing %s, incoming %s, record %s)",
            reference,
            stage.value,
            outgoing.id,
            incoming.id,
            record.id,
        )
        return TransferResult(
            reference=reference,
            outgoing_transaction=outgoing,
            incoming_transaction=incoming,
            transfer=record,
            balances_synced=balances_synced,
        )

    def _check_available(self, account: AccountRef, amount: Decimal) -> None:
        entry = self.ledger.get_balance(account)
        if entry is not None and amount > entry.current_balance:
            raise ValidationError(insufficient_funds(account, amount, entry.current_balance))

    def _compensate(self, reference: str, transaction_ids: list[int]) -> None:
        """Delete legs written by a failed attempt, newest first."""
        for transaction_id in reversed(transaction_ids):
            try:
                self.db.delete_transaction(transaction_id)
                logger.warning("Transfer %s: rolled back transaction %s", reference, transaction_id)
            except DomainError as e:
                logger.error(
                    "Transfer %s: could not roll back transaction %s, remove it by hand: %s",
                    reference,
                    transaction_id,
                    e,
                )

    def _update_balances(
        self, reference: str, from_account: AccountRef, to_account: AccountRef, amount: Decimal
    ) -> bool:
        """Move both balances. Failures are logged as drift, never raised."""
        synced = True
        for account, delta in ((from_account, -amount), (to_account, amount)):
            try:
                self.ledger.apply_delta(account, delta)
            except DomainError as e:
                synced = False
                logger.warning(
                    "Balance drift: transfer %s committed but balance of %s was not moved by %s: %s",
                    reference,
                    account,
                    delta,
                    e,
                )
        return synced

    def get_transfer(self, reference: str) -> TransferRecord:
        """Get a transfer by reference.

        Raises:
            NotFoundError: If no transfer has this reference
        """
        record = self.db.get_transfer(reference)
        if record is None:
            raise NotFoundError(transfer_not_found(reference))
        return record

    def list_transfers(self) -> list[TransferRecord]:
        """List transfers, newest first."""
        return self.db.list_transfers()
