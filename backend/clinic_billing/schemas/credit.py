from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from clinic_billing.models.credit import CreditKind
from clinic_billing.models.currency import Currency
from clinic_billing.schemas.money import Money


class CreditCreate(BaseModel):
    payer_id: UUID
    kind: CreditKind
    currency: Currency
    amount: Money = Field(gt=0)
    reference: str | None = Field(default=None, max_length=50)


class CreditResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    payer_id: UUID
    kind: str
    currency: str
    original_amount: Decimal
    available_balance: Decimal
    reference: str | None = None
    version: int
    created_at: datetime | None = None


class CreditConsumptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    credit_id: UUID
    invoice_id: UUID | None = None
    amount: Decimal
    resulting_balance: Decimal
    applied_amount: Decimal | None = None
    exchange_rate_used: Decimal | None = None
    created_at: datetime | None = None
