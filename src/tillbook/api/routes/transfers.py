"""
Transfer endpoints

GET  /transfers              - list transfers, newest first
GET  /transfers/{reference}  - one transfer
POST /transfers              - move funds between two accounts
"""

import logging

from fastapi import APIRouter, Depends

from tillbook.api.dependencies import get_transfer_service
from tillbook.api.models import (
    ErrorResponse,
    TransferCreateRequest,
    TransferResponse,
    TransferResultResponse,
)
from tillbook.domain.entities import AccountRef
from tillbook.domain.transfer import TransferService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transfers", tags=["transfers"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("", response_model=list[TransferResponse])
def list_transfers(service: TransferService = Depends(get_transfer_service)) -> list[TransferResponse]:
    return [TransferResponse.from_domain(record) for record in service.list_transfers()]


@router.get("/{reference}", response_model=TransferResponse, responses=ERROR_RESPONSES)
def get_transfer(
    reference: str, service: TransferService = Depends(get_transfer_service)
) -> TransferResponse:
    return TransferResponse.from_domain(service.get_transfer(reference))


@router.post("", response_model=TransferResultResponse, status_code=201, responses=ERROR_RESPONSES)
def create_transfer(
    body: TransferCreateRequest, service: TransferService = Depends(get_transfer_service)
) -> TransferResultResponse:
    """Move funds between a store and a savings account (either direction).

    A 201 with ``balancesSynced: false`` means the transfer was recorded
    but a balance could not be updated and needs manual correction.
    """
    result = service.transfer(
        from_account=AccountRef.parse(body.from_type, body.from_id),
        to_account=AccountRef.parse(body.to_type, body.to_id),
        amount=body.amount,
        notes=body.notes,
        staff_identity=body.staff_identity,
    )
    if not result.balances_synced:
        logger.warning("Transfer %s returned with unsynced balances", result.reference)
    return TransferResultResponse.from_domain(result)
