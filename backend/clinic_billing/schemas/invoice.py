from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from clinic_billing.models.currency import Currency
from clinic_billing.models.invoice import PaymentStatus
from clinic_billing.schemas.money import Money


class InvoiceCreate(BaseModel):
    payer_id: UUID
    doc_no: str | None = Field(default=None, max_length=50)
    currency: Currency = Currency.USD
    total: Money = Field(ge=0)
    paid_amount: Money = Field(default=Decimal("0"), ge=0)
    payment_status: PaymentStatus = PaymentStatus.UNPAID


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    doc_no: str | None = None
    payer_id: UUID
    currency: str
    total: Decimal
    paid_amount: Decimal
    payment_status: str
    version: int
    paid_at: datetime | None = None

    @property
    def remaining_balance(self) -> Decimal:
        return self.total - self.paid_amount
