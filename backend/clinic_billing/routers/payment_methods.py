"""Payment method catalog endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clinic_billing.core.database import get_db
from clinic_billing.models.payment_method import PaymentMethod
from clinic_billing.schemas.payment import PaymentMethodResponse
from clinic_billing.services.payment_methods import PaymentMethodCatalog

router = APIRouter()


@router.get(
    "/",
    response_model=list[PaymentMethodResponse],
    summary="List payment methods",
)
async def list_payment_methods(db: Session = Depends(get_db)) -> list[PaymentMethod]:
    """Active payment methods a cashier can record."""
    return PaymentMethodCatalog(db).list_active()
