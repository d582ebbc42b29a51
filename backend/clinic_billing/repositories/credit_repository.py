"""Credit repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from clinic_billing.models.credit import Credit
from clinic_billing.schemas.credit import CreditCreate


class CreditRepository:
    """Repository for Credit model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, credit_id: UUID) -> Credit | None:
        """Get a credit by ID."""
        return self.db.query(Credit).filter(Credit.id == credit_id).first()

    def get_many_fresh(self, credit_ids: list[UUID]) -> dict[UUID, Credit]:
        """Load several credits at once, keyed by id, bypassing stale session state."""
        if not credit_ids:
            return {}
        credits = (
            self.db.query(Credit)
            .filter(Credit.id.in_(credit_ids))
            .order_by(Credit.id.asc())
            .populate_existing()
            .all()
        )
        return {credit.id: credit for credit in credits}

    def get_available_by_payer_id(self, payer_id: UUID) -> list[Credit]:
        """Get credits with a positive balance for a payer, oldest first."""
        return (
            self.db.query(Credit)
            .filter(Credit.payer_id == payer_id, Credit.available_balance > 0)
            .order_by(Credit.created_at.asc())
            .all()
        )

    def create(self, data: CreditCreate) -> Credit:
        """Register a credit issued by a payment or credit note."""
        credit = Credit(
            payer_id=data.payer_id,
            kind=data.kind.value,
            currency=data.currency.value,
            original_amount=data.amount,
            available_balance=data.amount,
            reference=data.reference,
        )
        self.db.add(credit)
        self.db.commit()
        self.db.refresh(credit)
        return credit

    def deduct_balance(self, credit: Credit, amount: Decimal) -> Credit:
        """Deduct from a credit's balance. Flushes, never commits."""
        credit.available_balance = Decimal(str(credit.available_balance)) - amount  # type: ignore[assignment]
        self.db.flush()
        return credit
