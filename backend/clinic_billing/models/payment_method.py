"""PaymentMethod model: the catalog of tenders a cashier can accept."""

from sqlalchemy import Boolean, Column, DateTime, String, func

from clinic_billing.core.database import Base
from clinic_billing.models.shared import UUIDType, generate_uuid


class PaymentMethod(Base):
    __tablename__ = "payment_methods"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    code = Column(String(30), unique=True, index=True, nullable=False)  # CASH / BANK_TRANSFER / ...
    name = Column(String(100), nullable=False)
    is_cash_equivalent = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
