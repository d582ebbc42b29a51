"""Settlement request and result schemas.

A ``SettlementRequest`` is built once by the caller and passed whole into the
engine; it is frozen so nothing downstream can edit it in place.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from clinic_billing.models.currency import Currency
from clinic_billing.schemas.credit import CreditConsumptionResponse, CreditResponse
from clinic_billing.schemas.invoice import InvoiceResponse
from clinic_billing.schemas.money import Money, Rate
from clinic_billing.schemas.payment import PaymentRecordResponse


class CreditApplication(BaseModel):
    model_config = ConfigDict(frozen=True)

    credit_id: UUID
    amount_in_credit_currency: Money


class ManualPayment(BaseModel):
    """The new tender handed over at the desk (cash, card, transfer...)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    amount: Money
    currency: Currency
    method: str | None = Field(default=None, max_length=50)
    payment_date: date = Field(default_factory=date.today, alias="date")


class SettlementBody(BaseModel):
    """Settlement payload as received over HTTP; the invoice comes from the path."""

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(min_length=1, max_length=64)
    credit_applications: tuple[CreditApplication, ...] = ()
    manual_payment: ManualPayment | None = None
    exchange_rate: Rate | None = None
    expected_invoice_version: int | None = Field(default=None, ge=1)


class SettlementRequest(SettlementBody):
    invoice_id: UUID

    @property
    def manual_amount(self) -> Decimal:
        if self.manual_payment is None:
            return Decimal("0")
        return self.manual_payment.amount


class SettlementResult(BaseModel):
    """Post-commit state of everything a settlement touched."""

    model_config = ConfigDict(frozen=True)

    invoice: InvoiceResponse
    consumed_credits: list[CreditResponse] = Field(default_factory=list)
    consumptions: list[CreditConsumptionResponse] = Field(default_factory=list)
    payment_record: PaymentRecordResponse | None = None
    credits_total: Decimal
    manual_total: Decimal
    total_applied_in_invoice_currency: Decimal
