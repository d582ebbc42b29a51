"""Credit API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from clinic_billing.core.database import get_db
from clinic_billing.models.credit import Credit
from clinic_billing.schemas.credit import CreditResponse
from clinic_billing.services.credit_ledger import CreditLedger

router = APIRouter()


@router.get(
    "/",
    response_model=list[CreditResponse],
    summary="List available credits",
    responses={422: {"description": "Validation error"}},
)
async def list_available_credits(
    payer_id: UUID = Query(...),
    db: Session = Depends(get_db),
) -> list[Credit]:
    """Credits with a remaining balance for a payer, oldest first."""
    return CreditLedger(db).list_available(payer_id)
