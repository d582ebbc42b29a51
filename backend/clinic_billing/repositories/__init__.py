from clinic_billing.repositories.credit_consumption_repository import (
    CreditConsumptionRepository,
)
from clinic_billing.repositories.credit_repository import CreditRepository
from clinic_billing.repositories.invoice_repository import InvoiceRepository
from clinic_billing.repositories.payment_method_repository import PaymentMethodRepository
from clinic_billing.repositories.payment_record_repository import PaymentRecordRepository

__all__ = [
    "CreditConsumptionRepository",
    "CreditRepository",
    "InvoiceRepository",
    "PaymentMethodRepository",
    "PaymentRecordRepository",
]
