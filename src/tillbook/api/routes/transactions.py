"""
Transaction endpoints

GET  /transactions - list transactions, newest first
POST /transactions - post a transaction and update the account balance
"""

from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tillbook.api.dependencies import get_transaction_service, optional_account
from tillbook.api.models import ErrorResponse, TransactionCreateRequest, TransactionResponse
from tillbook.domain.entities import AccountRef
from tillbook.domain.transaction import TransactionService, parse_kind

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionResponse], responses={400: {"model": ErrorResponse}})
def list_transactions(
    account_type: Optional[str] = Query(default=None, description="store or savings"),
    account_id: Optional[int] = Query(default=None),
    date: Optional[date_type] = Query(default=None, description="Only this posting date"),
    kind: Optional[str] = Query(default=None, description="income, expense or transfer"),
    reference: Optional[str] = Query(default=None, description="Transfer reference"),
    service: TransactionService = Depends(get_transaction_service),
) -> list[TransactionResponse]:
    records = service.list_transactions(
        account=optional_account(account_type, account_id),
        start_date=date,
        end_date=date,
        kind=parse_kind(kind) if kind else None,
        reference=reference,
    )
    return [TransactionResponse.from_domain(record) for record in records]


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def create_transaction(
    body: TransactionCreateRequest, service: TransactionService = Depends(get_transaction_service)
) -> TransactionResponse:
    record = service.post_simple_transaction(
        account=AccountRef.parse(body.account_type, body.account_id),
        kind=body.kind,
        category=body.category,
        amount=body.amount,
        payment_method=body.payment_method,
        notes=body.notes,
        transaction_date=body.transaction_date,
        staff_identity=body.staff_identity,
    )
    return TransactionResponse.from_domain(record)
