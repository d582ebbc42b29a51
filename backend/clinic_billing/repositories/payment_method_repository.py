"""Repository for the payment method catalog."""

from uuid import UUID

from sqlalchemy.orm import Session

from clinic_billing.models.payment_method import PaymentMethod


class PaymentMethodRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, active_only: bool = False) -> list[PaymentMethod]:
        query = self.db.query(PaymentMethod)
        if active_only:
            query = query.filter(PaymentMethod.is_active == True)  # noqa: E712
        return query.order_by(PaymentMethod.code.asc()).all()

    def get_by_id(self, payment_method_id: UUID) -> PaymentMethod | None:
        return self.db.query(PaymentMethod).filter(PaymentMethod.id == payment_method_id).first()

    def get_by_code(self, code: str) -> PaymentMethod | None:
        return self.db.query(PaymentMethod).filter(PaymentMethod.code == code.upper()).first()

    def create(
        self,
        code: str,
        name: str,
        is_cash_equivalent: bool = False,
        is_active: bool = True,
    ) -> PaymentMethod:
        payment_method = PaymentMethod(
            code=code.upper(),
            name=name,
            is_cash_equivalent=is_cash_equivalent,
            is_active=is_active,
        )
        self.db.add(payment_method)
        self.db.commit()
        self.db.refresh(payment_method)
        return payment_method
