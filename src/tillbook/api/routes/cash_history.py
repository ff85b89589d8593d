"""
Cash history endpoints

GET  /cash-history - stored daily records, newest date first
POST /cash-history - recompute the record of one account for one day
"""

from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tillbook.api.dependencies import (
    existing_account,
    get_account_service,
    get_snapshot_service,
    optional_account,
)
from tillbook.api.models import CashHistoryRequest, ErrorResponse, HistoryResponse
from tillbook.domain.account import AccountService
from tillbook.domain.snapshot import SnapshotService

router = APIRouter(prefix="/cash-history", tags=["cash-history"])


@router.get("", response_model=list[HistoryResponse], responses={400: {"model": ErrorResponse}})
def list_history(
    account_type: Optional[str] = Query(default=None, description="store or savings"),
    account_id: Optional[int] = Query(default=None),
    date: Optional[date_type] = Query(default=None),
    service: SnapshotService = Depends(get_snapshot_service),
) -> list[HistoryResponse]:
    records = service.list_history(account=optional_account(account_type, account_id), on_date=date)
    return [HistoryResponse.from_domain(record) for record in records]


@router.post(
    "",
    response_model=HistoryResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def create_snapshot(
    body: CashHistoryRequest,
    service: SnapshotService = Depends(get_snapshot_service),
    accounts: AccountService = Depends(get_account_service),
) -> HistoryResponse:
    ref = existing_account(accounts, body.account_type, body.account_id)
    record = service.compute_snapshot(ref, body.date or date_type.today())
    return HistoryResponse.from_domain(record)
