"""
Cash balance endpoints

GET  /cash-balance - all balance entries
POST /cash-balance - manual balance posting
"""

from fastapi import APIRouter, Depends

from tillbook.api.dependencies import existing_account, get_account_service, get_ledger
from tillbook.api.models import BalanceResponse, CashBalanceRequest, ErrorResponse
from tillbook.domain.account import AccountService
from tillbook.domain.balance import BalanceLedger

router = APIRouter(prefix="/cash-balance", tags=["cash-balance"])


@router.get("", response_model=list[BalanceResponse])
def list_balances(ledger: BalanceLedger = Depends(get_ledger)) -> list[BalanceResponse]:
    return [BalanceResponse.from_domain(entry) for entry in ledger.list_balances()]


@router.post(
    "",
    response_model=BalanceResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def post_balance(
    body: CashBalanceRequest,
    ledger: BalanceLedger = Depends(get_ledger),
    accounts: AccountService = Depends(get_account_service),
) -> BalanceResponse:
    """Add, subtract or overwrite a balance without recording a transaction.

    ``income`` adds, ``expense`` and ``transfer`` subtract, ``adjustment``
    sets the balance to ``amount``.
    """
    ref = existing_account(accounts, body.account_type, body.account_id)
    entry = ledger.post_adjustment(ref, body.kind, body.amount)
    return BalanceResponse.from_domain(entry)
