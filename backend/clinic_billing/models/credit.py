"""Credit model for balances a payer can apply against invoices."""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, func

from clinic_billing.core.database import Base
from clinic_billing.models.shared import UUIDType, generate_uuid


class CreditKind(str, Enum):
    CREDIT_NOTE = "credit_note"
    DIRECT_PAYMENT = "direct_payment"


class Credit(Base):
    """Credit model.

    ``available_balance`` is expressed in the credit's own currency and only
    ever decreases. Exhausted credits stay in the table as an audit record.
    The row ``id`` is the credit's source id as issued by the payment or
    credit note that created it.
    """

    __tablename__ = "credits"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    payer_id = Column(UUIDType, nullable=False, index=True)
    kind = Column(String(20), nullable=False)
    currency = Column(String(3), nullable=False)
    original_amount = Column(Numeric(12, 4), nullable=False)
    available_balance = Column(Numeric(12, 4), nullable=False)
    reference = Column(String(50), nullable=True)

    version = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "available_balance >= 0", name="ck_credits_available_balance_non_negative"
        ),
    )
    __mapper_args__ = {"version_id_col": version}
