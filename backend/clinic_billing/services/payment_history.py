"""Payment history of an invoice: manual tenders and credit allocations in one list."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from clinic_billing.core.exceptions import InvoiceNotFound
from clinic_billing.models.credit import Credit, CreditKind
from clinic_billing.models.payment_record import TransactionType
from clinic_billing.repositories.credit_consumption_repository import (
    CreditConsumptionRepository,
)
from clinic_billing.repositories.invoice_repository import InvoiceRepository
from clinic_billing.repositories.payment_record_repository import PaymentRecordRepository
from clinic_billing.schemas.payment import PaymentHistoryEntry


def _chronological_key(entry: PaymentHistoryEntry) -> tuple[bool, datetime]:
    # Undated entries sort first and are never compared with real timestamps,
    # which may be naive (SQLite) or aware (PostgreSQL)
    return (entry.created_at is not None, entry.created_at or datetime.min)


class PaymentHistoryService:
    def __init__(self, db: Session):
        self.db = db
        self.invoice_repo = InvoiceRepository(db)
        self.payment_repo = PaymentRecordRepository(db)
        self.consumption_repo = CreditConsumptionRepository(db)

    def list_for_invoice(self, invoice_id: UUID) -> list[PaymentHistoryEntry]:
        """Everything applied to an invoice, oldest first."""
        invoice = self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found", invoice_id=invoice_id)

        entries = [
            PaymentHistoryEntry(
                transaction_type=TransactionType(record.transaction_type),
                transaction_id=record.id,  # type: ignore[arg-type]
                amount_applied=Decimal(str(record.converted_amount)),
                source_amount=Decimal(str(record.amount)),
                source_currency=str(record.currency),
                exchange_rate=record.exchange_rate_used,  # type: ignore[arg-type]
                payment_method=str(record.method),
                payment_date=record.payment_date,  # type: ignore[arg-type]
                created_at=record.created_at,  # type: ignore[arg-type]
            )
            for record in self.payment_repo.get_by_invoice_id(invoice_id)
        ]

        consumptions = self.consumption_repo.get_by_invoice_id(invoice_id)
        credit_ids = {consumption.credit_id for consumption in consumptions}
        credits: dict[UUID, Credit] = {}
        if credit_ids:
            query = self.db.query(Credit).filter(Credit.id.in_(list(credit_ids)))
            credits = {credit.id: credit for credit in query.all()}  # type: ignore[misc]

        for consumption in consumptions:
            credit = credits[consumption.credit_id]
            if credit.kind == CreditKind.CREDIT_NOTE.value:
                transaction_type = TransactionType.CREDIT_NOTE_ALLOCATION
            else:
                transaction_type = TransactionType.PAYMENT_ALLOCATION
            applied = consumption.applied_amount
            entries.append(
                PaymentHistoryEntry(
                    transaction_type=transaction_type,
                    transaction_id=consumption.id,  # type: ignore[arg-type]
                    reference_id=credit.id,  # type: ignore[arg-type]
                    amount_applied=Decimal(
                        str(applied if applied is not None else consumption.amount)
                    ),
                    source_amount=Decimal(str(consumption.amount)),
                    source_currency=str(credit.currency),
                    exchange_rate=consumption.exchange_rate_used,  # type: ignore[arg-type]
                    payment_date=consumption.created_at.date() if consumption.created_at else None,
                    created_at=consumption.created_at,  # type: ignore[arg-type]
                )
            )

        entries.sort(key=_chronological_key)
        return entries
