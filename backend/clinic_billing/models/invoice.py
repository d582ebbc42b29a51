"""Invoice model.

Invoices are created and booked elsewhere; settlement only moves
``paid_amount`` forward and re-derives ``payment_status``.
"""

from enum import Enum

from sqlalchemy import Column, DateTime, Integer, Numeric, String, func

from clinic_billing.core.database import Base
from clinic_billing.models.shared import UUIDType, generate_uuid


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    doc_no = Column(String(50), unique=True, index=True, nullable=True)
    payer_id = Column(UUIDType, nullable=False, index=True)

    currency = Column(String(3), nullable=False, default="USD")
    total = Column(Numeric(12, 4), nullable=False, default=0)
    paid_amount = Column(Numeric(12, 4), nullable=False, default=0)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.UNPAID.value)

    # Optimistic concurrency token, bumped on every UPDATE
    version = Column(Integer, nullable=False)

    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}
