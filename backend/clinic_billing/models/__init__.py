from clinic_billing.models.credit import Credit, CreditKind
from clinic_billing.models.credit_consumption import CreditConsumption
from clinic_billing.models.currency import Currency
from clinic_billing.models.invoice import Invoice, PaymentStatus
from clinic_billing.models.payment_method import PaymentMethod
from clinic_billing.models.payment_record import PaymentRecord, TransactionType

__all__ = [
    "Credit",
    "CreditConsumption",
    "CreditKind",
    "Currency",
    "Invoice",
    "PaymentMethod",
    "PaymentRecord",
    "PaymentStatus",
    "TransactionType",
]
