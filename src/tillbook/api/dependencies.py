"""
Dependency injection

Services are built per request around the database handle that
``create_app`` stored on ``app.state``.
"""

from typing import Iterator, Optional

from fastapi import Depends, Request

from tillbook.config import Settings
from tillbook.database.base import Database
from tillbook.domain.account import AccountService
from tillbook.domain.balance import BalanceLedger
from tillbook.domain.entities import AccountRef
from tillbook.domain.errors import NotFoundError, ValidationError, account_not_found
from tillbook.domain.snapshot import SnapshotService
from tillbook.domain.transaction import TransactionService
from tillbook.domain.transfer import TransferService


def get_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Database]:
    """Database handle.

    Teardown runs on whichever threadpool worker FastAPI picks, which is
    usually not the one that served the endpoint, so this releases that
    worker's scoped session. Sessions stay bounded by the pool size and
    each unit of work commits or rolls back on its own.
    """
    db = request.app.state.db
    try:
        yield db
    finally:
        db.disconnect()


def get_account_service(db: Database = Depends(get_db)) -> AccountService:
    return AccountService(db)


def get_ledger(db: Database = Depends(get_db)) -> BalanceLedger:
    return BalanceLedger(db)


def get_transaction_service(db: Database = Depends(get_db)) -> TransactionService:
    return TransactionService(db)


def get_transfer_service(
    db: Database = Depends(get_db), settings: Settings = Depends(get_settings)
) -> TransferService:
    return TransferService(db, block_overdraft=settings.block_overdraft)


def get_snapshot_service(db: Database = Depends(get_db)) -> SnapshotService:
    return SnapshotService(db)


def optional_account(account_type: Optional[str], account_id: Optional[int]) -> Optional[AccountRef]:
    """Build an account filter from query parameters.

    Raises:
        ValidationError: If only one of the two parameters is given
    """
    if account_type is None and account_id is None:
        return None
    if account_type is None or account_id is None:
        raise ValidationError("account_type and account_id must be given together")
    return AccountRef.parse(account_type, account_id)


def existing_account(accounts: AccountService, account_type: str, account_id: int) -> AccountRef:
    """Build an AccountRef and require the account to exist.

    Raises:
        ValidationError: If the type or id is invalid
        NotFoundError: If the account doesn't exist
    """
    ref = AccountRef.parse(account_type, account_id)
    if accounts.get_account(ref) is None:
        raise NotFoundError(account_not_found(ref))
    return ref
