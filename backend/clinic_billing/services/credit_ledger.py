"""Credit ledger: the only code path that changes a credit's balance."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from clinic_billing.core.exceptions import CreditNotFound, InsufficientCredit, ValidationError
from clinic_billing.models.credit import Credit
from clinic_billing.models.credit_consumption import CreditConsumption
from clinic_billing.repositories.credit_consumption_repository import (
    CreditConsumptionRepository,
)
from clinic_billing.repositories.credit_repository import CreditRepository

logger = logging.getLogger(__name__)


class CreditLedger:
    """Tracks available balance per credit source and consumes it.

    ``apply`` runs inside the caller's transaction: it flushes the balance
    change and the consumption record but leaves the commit (or rollback) to
    whoever opened the unit of work.
    """

    def __init__(self, db: Session):
        self.db = db
        self.credit_repo = CreditRepository(db)
        self.consumption_repo = CreditConsumptionRepository(db)

    def list_available(self, payer_id: UUID) -> list[Credit]:
        """Credits with a positive balance for a payer, oldest first."""
        return self.credit_repo.get_available_by_payer_id(payer_id)

    def apply(
        self,
        credit_id: UUID,
        amount_in_credit_currency: Decimal,
        invoice_id: UUID | None = None,
        session_id: str | None = None,
        applied_amount: Decimal | None = None,
        exchange_rate_used: Decimal | None = None,
    ) -> CreditConsumption:
        """Consume part of a credit and append the consumption record.

        The recorded consumption is always exactly the requested amount; a
        request for more than the balance is refused, never trimmed, so the
        invoice side and the credit side of a settlement move by the same
        money.

        Raises:
            ValidationError: If the amount is zero or negative.
            CreditNotFound: If the credit does not exist.
            InsufficientCredit: If the amount exceeds the available balance.
        """
        if amount_in_credit_currency <= 0:
            raise ValidationError(
                "Credit applications must be positive",
                credit_id=credit_id,
                amount=amount_in_credit_currency,
            )

        credit = self.credit_repo.get_by_id(credit_id)
        if not credit:
            raise CreditNotFound(f"Credit {credit_id} not found", credit_id=credit_id)

        balance = Decimal(str(credit.available_balance))
        if amount_in_credit_currency > balance:
            raise InsufficientCredit(
                f"Amount {amount_in_credit_currency} exceeds available balance {balance}",
                credit_id=credit_id,
                requested=amount_in_credit_currency,
                available_balance=balance,
            )

        self.credit_repo.deduct_balance(credit, amount_in_credit_currency)
        resulting_balance = balance - amount_in_credit_currency

        logger.debug(
            "Applied %s %s from credit %s, %s left",
            amount_in_credit_currency,
            credit.currency,
            credit_id,
            resulting_balance,
        )
        return self.consumption_repo.append(
            credit_id=credit_id,
            amount=amount_in_credit_currency,
            resulting_balance=resulting_balance,
            invoice_id=invoice_id,
            session_id=session_id,
            applied_amount=applied_amount,
            exchange_rate_used=exchange_rate_used,
        )
