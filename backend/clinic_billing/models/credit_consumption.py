"""CreditConsumption model: append-only record of credit applied to an invoice."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String, func

from clinic_billing.core.database import Base
from clinic_billing.models.shared import UUIDType, generate_uuid


class CreditConsumption(Base):
    __tablename__ = "credit_consumptions"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    credit_id = Column(
        UUIDType, ForeignKey("credits.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    invoice_id = Column(
        UUIDType, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    session_id = Column(String(64), nullable=True)

    # Amount in the credit's currency and balance left after this application
    amount = Column(Numeric(12, 4), nullable=False)
    resulting_balance = Column(Numeric(12, 4), nullable=False)

    # Same application expressed in the invoice currency
    applied_amount = Column(Numeric(12, 4), nullable=True)
    exchange_rate_used = Column(Numeric(18, 8), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("ix_credit_consumptions_credit_invoice", "credit_id", "invoice_id"),)
