from clinic_billing.schemas.cash_session import (
    CashSessionData,
    CashSessionEnvelope,
    CashSessionInfo,
)
from clinic_billing.schemas.credit import (
    CreditConsumptionResponse,
    CreditCreate,
    CreditResponse,
)
from clinic_billing.schemas.invoice import InvoiceCreate, InvoiceResponse
from clinic_billing.schemas.payment import (
    PaymentHistoryEntry,
    PaymentMethodResponse,
    PaymentRecordResponse,
)
from clinic_billing.schemas.settlement import (
    CreditApplication,
    ManualPayment,
    SettlementBody,
    SettlementRequest,
    SettlementResult,
)

__all__ = [
    "CashSessionData",
    "CashSessionEnvelope",
    "CashSessionInfo",
    "CreditApplication",
    "CreditConsumptionResponse",
    "CreditCreate",
    "CreditResponse",
    "InvoiceCreate",
    "InvoiceResponse",
    "ManualPayment",
    "PaymentHistoryEntry",
    "PaymentMethodResponse",
    "PaymentRecordResponse",
    "SettlementBody",
    "SettlementRequest",
    "SettlementResult",
]
