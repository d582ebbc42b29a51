"""PaymentRecord model: the manual tender of a settlement."""

from enum import Enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, func

from clinic_billing.core.database import Base
from clinic_billing.models.shared import UUIDType, generate_uuid


class TransactionType(str, Enum):
    """How an amount reached an invoice, as shown in its payment history."""

    DIRECT_PAYMENT = "direct_payment"
    CREDIT_NOTE_ALLOCATION = "credit_note_allocation"
    PAYMENT_ALLOCATION = "payment_allocation"


class PaymentRecord(Base):
    __tablename__ = "payment_records"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    invoice_id = Column(
        UUIDType, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    session_id = Column(String(64), nullable=False, index=True)

    amount = Column(Numeric(12, 4), nullable=False)
    currency = Column(String(3), nullable=False)
    method = Column(String(50), nullable=False)
    payment_date = Column(Date, nullable=False)
    exchange_rate_used = Column(Numeric(18, 8), nullable=True)
    converted_amount = Column(Numeric(12, 4), nullable=False)
    transaction_type = Column(
        String(30), nullable=False, default=TransactionType.DIRECT_PAYMENT.value
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
