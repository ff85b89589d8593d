"""Account domain service."""

import logging
from decimal import Decimal
from typing import Optional, Union

from tillbook.database.base import Database
from tillbook.domain.entities import (
    AccountKind,
    AccountRef,
    AccountStatus,
    SavingsAccount,
    Store,
)
from tillbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_active,
    account_not_found,
    duplicate_account_code,
    missing_field,
)

logger = logging.getLogger(__name__)

AccountEntity = Union[Store, SavingsAccount]


def _require_text(value: Optional[str], field_name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(missing_field(field_name))
    return value.strip()


class AccountService:
    """Service for the store and savings account registry."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_store(
        self,
        code: str,
        branch: str,
        address: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        status: AccountStatus = AccountStatus.ACTIVE,
    ) -> int:
        """Create a new store.

        Args:
            code: External store code (unique)
            branch: Branch display name
            address: Street address
            phone: Optional phone number
            email: Optional contact email
            status: Initial lifecycle status

        Returns:
            Store ID

        Raises:
            ValidationError: If code, branch or address is missing
            ConflictError: If a store with the same code exists
        """
        code = _require_text(code, "Store code")
        branch = _require_text(branch, "Branch")
        address = _require_text(address, "Address")

        if self.db.get_store_by_code(code) is not None:
            raise ConflictError(duplicate_account_code(AccountKind.STORE.value, code))

        store_id = self.db.create_store(
            code=code, branch=branch, address=address, phone=phone, email=email, status=status
        )
        logger.info("Created store %s (%s) with id %s", code, branch, store_id)
        return store_id

    def create_savings_account(
        self,
        code: str,
        name: str,
        account_type: str,
        bank_name: Optional[str] = None,
        account_number: Optional[str] = None,
        opening_balance: Decimal = Decimal("0"),
        notes: Optional[str] = None,
    ) -> int:
        """Create a new savings account.

        A non-zero opening balance is written to the balance ledger as an
        absolute value.

        Returns:
            Savings account ID

        Raises:
            ValidationError: If code, name or account type is missing
            ConflictError: If a savings account with the same code exists
        """
        code = _require_text(code, "Account code")
        name = _require_text(name, "Account name")
        account_type = _require_text(account_type, "Account type")

        if self.db.get_savings_account_by_code(code) is not None:
            raise ConflictError(duplicate_account_code(AccountKind.SAVINGS.value, code))

        account_id = self.db.create_savings_account(
            code=code,
            name=name,
            account_type=account_type,
            bank_name=bank_name,
            account_number=account_number,
            notes=notes,
        )
        if opening_balance:
            self.db.set_balance(AccountRef.savings(account_id), Decimal(opening_balance))
        logger.info("Created savings account %s (%s) with id %s", code, name, account_id)
        return account_id

    def get_account(self, ref: AccountRef) -> Optional[AccountEntity]:
        """Get a store or savings account by reference.

        Returns:
            Account entity or None if not found
        """
        if ref.is_store:
            return self.db.get_store(ref.id)
        return self.db.get_savings_account(ref.id)

    def find_by_code(self, kind: AccountKind, code: str) -> Optional[AccountEntity]:
        """Look up an account by its external code."""
        if kind is AccountKind.STORE:
            return self.db.get_store_by_code(code)
        return self.db.get_savings_account_by_code(code)

    def list_stores(self, status: Optional[AccountStatus] = None) -> list[Store]:
        """List stores, optionally only those with the given status."""
        return self.db.list_stores(status=status)

    def list_savings_accounts(self, status: Optional[AccountStatus] = None) -> list[SavingsAccount]:
        """List savings accounts, optionally only those with the given status."""
        return self.db.list_savings_accounts(status=status)

    def set_status(self, ref: AccountRef, status: AccountStatus) -> None:
        """Change the lifecycle status of an account.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        if self.get_account(ref) is None:
            raise NotFoundError(account_not_found(ref))
        self.db.update_account_status(ref, status)
        logger.info("Account %s is now %s", ref, status.value)

    def require_active(self, ref: AccountRef) -> AccountEntity:
        """Return the account if it exists and may take new postings.

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If the account is inactive or stopped
        """
        account = self.get_account(ref)
        if account is None:
            raise NotFoundError(account_not_found(ref))
        if account.status is not AccountStatus.ACTIVE:
            raise ValidationError(account_not_active(ref, account.status.value))
        return account
