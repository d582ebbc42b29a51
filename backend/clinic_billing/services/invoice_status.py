from decimal import Decimal

from clinic_billing.core.config import settings
from clinic_billing.models.invoice import PaymentStatus


class InvoiceStatusProjector:
    """Derives an invoice's payment status from its paid and total amounts."""

    def __init__(self, epsilon: Decimal | None = None) -> None:
        self.epsilon = epsilon if epsilon is not None else settings.SETTLEMENT_EPSILON

    def project(self, paid_amount: Decimal, total: Decimal) -> PaymentStatus:
        if paid_amount >= total - self.epsilon:
            return PaymentStatus.PAID
        if paid_amount <= self.epsilon:
            return PaymentStatus.UNPAID
        return PaymentStatus.PARTIAL
