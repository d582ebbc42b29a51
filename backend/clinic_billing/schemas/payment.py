from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from clinic_billing.models.payment_record import TransactionType


class PaymentRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_id: UUID
    session_id: str
    amount: Decimal
    currency: str
    method: str
    payment_date: date
    exchange_rate_used: Decimal | None = None
    converted_amount: Decimal
    transaction_type: str
    created_at: datetime | None = None


class PaymentMethodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    name: str
    is_cash_equivalent: bool
    is_active: bool


class PaymentHistoryEntry(BaseModel):
    """One line of an invoice's payment history."""

    transaction_type: TransactionType
    transaction_id: UUID
    reference_id: UUID | None = None
    amount_applied: Decimal
    source_amount: Decimal
    source_currency: str
    exchange_rate: Decimal | None = None
    payment_method: str | None = None
    payment_date: date | None = None
    created_at: datetime | None = None
