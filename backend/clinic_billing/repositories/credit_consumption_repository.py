"""Credit consumption repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func as sa_func
from sqlalchemy.orm import Session

from clinic_billing.models.credit_consumption import CreditConsumption


class CreditConsumptionRepository:
    """Repository for CreditConsumption model. Records are append-only."""

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        credit_id: UUID,
        amount: Decimal,
        resulting_balance: Decimal,
        invoice_id: UUID | None = None,
        session_id: str | None = None,
        applied_amount: Decimal | None = None,
        exchange_rate_used: Decimal | None = None,
    ) -> CreditConsumption:
        consumption = CreditConsumption(
            credit_id=credit_id,
            invoice_id=invoice_id,
            session_id=session_id,
            amount=amount,
            resulting_balance=resulting_balance,
            applied_amount=applied_amount,
            exchange_rate_used=exchange_rate_used,
        )
        self.db.add(consumption)
        self.db.flush()
        return consumption

    def get_by_credit_id(self, credit_id: UUID) -> list[CreditConsumption]:
        return (
            self.db.query(CreditConsumption)
            .filter(CreditConsumption.credit_id == credit_id)
            .order_by(CreditConsumption.created_at.asc())
            .all()
        )

    def get_by_invoice_id(self, invoice_id: UUID) -> list[CreditConsumption]:
        return (
            self.db.query(CreditConsumption)
            .filter(CreditConsumption.invoice_id == invoice_id)
            .order_by(CreditConsumption.created_at.asc())
            .all()
        )

    def get_total_consumed(self, credit_id: UUID) -> Decimal:
        """Sum of every amount ever taken from a credit."""
        result = (
            self.db.query(sa_func.sum(CreditConsumption.amount))
            .filter(CreditConsumption.credit_id == credit_id)
            .scalar()
        )
        return Decimal(str(result)) if result else Decimal("0")
