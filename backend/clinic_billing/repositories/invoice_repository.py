"""Invoice repository: reads for settlement and the paid-amount update."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from clinic_billing.models.invoice import Invoice, PaymentStatus
from clinic_billing.models.shared import utc_now
from clinic_billing.schemas.invoice import InvoiceCreate


class InvoiceRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, invoice_id: UUID) -> Invoice | None:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def get_fresh(self, invoice_id: UUID) -> Invoice | None:
        """Load an invoice, overwriting any stale copy held by the session."""
        return (
            self.db.query(Invoice)
            .filter(Invoice.id == invoice_id)
            .populate_existing()
            .first()
        )

    def create(self, data: InvoiceCreate) -> Invoice:
        """Store an invoice issued by the ordering side."""
        invoice = Invoice(
            payer_id=data.payer_id,
            doc_no=data.doc_no,
            currency=data.currency.value,
            total=data.total,
            paid_amount=data.paid_amount,
            payment_status=data.payment_status.value,
        )
        self.db.add(invoice)
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def apply_payment(self, invoice: Invoice, amount: Decimal, status: PaymentStatus) -> Invoice:
        """Move ``paid_amount`` forward by ``amount`` and set the derived status.

        Only flushes: the caller commits together with the rest of the settlement.
        """
        invoice.paid_amount = Decimal(str(invoice.paid_amount)) + amount  # type: ignore[assignment]
        invoice.payment_status = status.value  # type: ignore[assignment]
        if status == PaymentStatus.PAID and invoice.paid_at is None:
            invoice.paid_at = utc_now()  # type: ignore[assignment]
        self.db.flush()
        return invoice
