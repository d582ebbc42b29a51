"""Invoice settlement API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from clinic_billing.core.database import get_db
from clinic_billing.core.exceptions import (
    CollaboratorError,
    ConcurrencyConflict,
    CreditNotFound,
    InvoiceNotFound,
    NoActiveSession,
    SettlementError,
    ValidationError,
)
from clinic_billing.schemas.payment import PaymentHistoryEntry
from clinic_billing.schemas.settlement import SettlementBody, SettlementRequest, SettlementResult
from clinic_billing.services.cash_session import (
    CashSessionService,
    get_cash_session_service,
    prepare_settlement_request,
)
from clinic_billing.services.payment_history import PaymentHistoryService
from clinic_billing.services.settlement_engine import SettlementEngine

router = APIRouter()


def to_http_exception(exc: SettlementError) -> HTTPException:
    """Map a settlement error onto an HTTP status, keeping its full payload."""
    if isinstance(exc, (InvoiceNotFound, CreditNotFound)):
        status_code = 404
    elif isinstance(exc, ValidationError):
        status_code = 422
    elif isinstance(exc, ConcurrencyConflict):
        status_code = 409
    elif isinstance(exc, NoActiveSession):
        status_code = 412
    elif isinstance(exc, CollaboratorError):
        status_code = 502
    else:
        status_code = 400
    return HTTPException(status_code=status_code, detail=exc.to_dict())


@router.post(
    "/{invoice_id}/settlements",
    response_model=SettlementResult,
    status_code=201,
    summary="Settle invoice",
    responses={
        400: {"description": "Settlement rejected by a business rule"},
        404: {"description": "Invoice or credit not found"},
        409: {"description": "Invoice changed concurrently; reload and retry"},
        412: {"description": "No active cash session"},
        422: {"description": "Validation error"},
        502: {"description": "Cash session service unavailable"},
    },
)
async def settle_invoice(
    invoice_id: UUID,
    data: SettlementBody,
    db: Session = Depends(get_db),
    sessions: CashSessionService = Depends(get_cash_session_service),
) -> SettlementResult:
    """Apply credits and an optional manual payment to an invoice in one step."""
    try:
        request = prepare_settlement_request(
            SettlementRequest.model_validate({**data.model_dump(), "invoice_id": invoice_id}),
            sessions,
        )
        return SettlementEngine(db).settle(request)
    except SettlementError as exc:
        raise to_http_exception(exc) from exc


@router.get(
    "/{invoice_id}/payments",
    response_model=list[PaymentHistoryEntry],
    summary="List invoice payments",
    responses={404: {"description": "Invoice not found"}},
)
async def list_invoice_payments(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> list[PaymentHistoryEntry]:
    """Manual payments and credit allocations applied to an invoice."""
    try:
        return PaymentHistoryService(db).list_for_invoice(invoice_id)
    except SettlementError as exc:
        raise to_http_exception(exc) from exc
