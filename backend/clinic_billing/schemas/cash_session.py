"""Strict parsing of cash session service payloads.

The service answers with an envelope ``{"code": 200, "data": {...}}``; a 404
code means the operator has no open session.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from clinic_billing.models.currency import Currency


class CashSessionData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    is_active: bool
    base_currency: Currency
    exchange_rate: Decimal | None = Field(default=None, gt=0, max_digits=18, decimal_places=8)


class CashSessionEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: int
    data: CashSessionData | None = None


class CashSessionInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str
    is_active: bool
    base_currency: Currency
    default_exchange_rate: Decimal | None = None
