"""Payment ledger repository for manual tenders."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from clinic_billing.models.payment_record import PaymentRecord, TransactionType


class PaymentRecordRepository:
    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        invoice_id: UUID,
        session_id: str,
        amount: Decimal,
        currency: str,
        method: str,
        payment_date: date,
        converted_amount: Decimal,
        exchange_rate_used: Decimal | None = None,
    ) -> PaymentRecord:
        record = PaymentRecord(
            invoice_id=invoice_id,
            session_id=session_id,
            amount=amount,
            currency=currency,
            method=method,
            payment_date=payment_date,
            exchange_rate_used=exchange_rate_used,
            converted_amount=converted_amount,
            transaction_type=TransactionType.DIRECT_PAYMENT.value,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def get_by_invoice_id(self, invoice_id: UUID) -> list[PaymentRecord]:
        return (
            self.db.query(PaymentRecord)
            .filter(PaymentRecord.invoice_id == invoice_id)
            .order_by(PaymentRecord.created_at.asc())
            .all()
        )
