"""Settlement engine: applies credits and a manual tender to one invoice atomically.

The engine reads the invoice and the referenced credits, converts every amount
to the invoice currency, validates the whole proposal and only then writes.
All writes share one transaction. ``Invoice`` and ``Credit`` rows carry a
version column, so a write based on a snapshot that another settlement has
already moved past updates zero rows and the attempt fails with
``ConcurrencyConflict`` instead of double counting.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from clinic_billing.core.exceptions import (
    ConcurrencyConflict,
    CreditNotFound,
    InvoiceNotFound,
    SettlementError,
)
from clinic_billing.models.credit import Credit
from clinic_billing.models.credit_consumption import CreditConsumption
from clinic_billing.models.currency import Currency
from clinic_billing.models.invoice import Invoice
from clinic_billing.models.payment_method import PaymentMethod
from clinic_billing.models.payment_record import PaymentRecord
from clinic_billing.repositories.credit_repository import CreditRepository
from clinic_billing.repositories.invoice_repository import InvoiceRepository
from clinic_billing.repositories.payment_record_repository import PaymentRecordRepository
from clinic_billing.schemas.credit import CreditConsumptionResponse, CreditResponse
from clinic_billing.schemas.invoice import InvoiceResponse
from clinic_billing.schemas.payment import PaymentRecordResponse
from clinic_billing.schemas.settlement import SettlementRequest, SettlementResult
from clinic_billing.services.credit_ledger import CreditLedger
from clinic_billing.services.currency import CurrencyConverter
from clinic_billing.services.invoice_status import InvoiceStatusProjector
from clinic_billing.services.payment_methods import PaymentMethodCatalog
from clinic_billing.services.settlement_validator import PlannedApplication, SettlementValidator

logger = logging.getLogger(__name__)


@dataclass
class SettlementSnapshot:
    """Invoice and credits as read at the start of a settlement."""

    invoice: Invoice
    credits: dict[UUID, Credit]
    version: int

    @property
    def remaining_balance(self) -> Decimal:
        return Decimal(str(self.invoice.total)) - Decimal(str(self.invoice.paid_amount))


@dataclass
class SettlementPlan:
    """Validated amounts, ready to be written."""

    remaining_balance: Decimal
    applications: list[PlannedApplication] = field(default_factory=list)
    credits_total: Decimal = Decimal("0")
    manual_total: Decimal = Decimal("0")
    payment_method: PaymentMethod | None = None

    @property
    def total_applied(self) -> Decimal:
        return self.credits_total + self.manual_total


class SettlementEngine:
    """Orchestrates conversion, validation and the atomic commit of a settlement.

    The engine keeps no state between calls; everything it needs travels in
    the ``SettlementRequest``, including the exchange rate.
    """

    def __init__(
        self,
        db: Session,
        converter: CurrencyConverter | None = None,
        validator: SettlementValidator | None = None,
        projector: InvoiceStatusProjector | None = None,
    ):
        self.db = db
        self.converter = converter or CurrencyConverter()
        self.validator = validator or SettlementValidator(payment_methods=PaymentMethodCatalog(db))
        self.projector = projector or InvoiceStatusProjector()
        self.invoice_repo = InvoiceRepository(db)
        self.credit_repo = CreditRepository(db)
        self.payment_repo = PaymentRecordRepository(db)
        self.ledger = CreditLedger(db)

    def settle(self, request: SettlementRequest) -> SettlementResult:
        """Apply a settlement request, all or nothing.

        Raises:
            SettlementError: Any rule violation; nothing has been written.
            ConcurrencyConflict: The invoice or a credit changed under us.
        """
        try:
            snapshot = self._load_snapshot(request)
            plan = self._plan(snapshot, request)
            consumptions, payment_record = self._commit(snapshot, plan, request)
        except StaleDataError as exc:
            self.db.rollback()
            logger.warning("Settlement of invoice %s lost a race: %s", request.invoice_id, exc)
            raise ConcurrencyConflict(
                "Invoice or credit changed while settling; reload and retry",
                invoice_id=request.invoice_id,
            ) from exc
        except SettlementError as exc:
            self.db.rollback()
            logger.warning(
                "Settlement of invoice %s rejected (%s): %s",
                request.invoice_id,
                exc.code,
                exc.details,
            )
            raise
        except Exception:
            self.db.rollback()
            raise

        result = self._build_result(snapshot, plan, consumptions, payment_record)
        logger.info(
            "Settled invoice %s: applied %s %s, status %s",
            request.invoice_id,
            result.total_applied_in_invoice_currency,
            result.invoice.currency,
            result.invoice.payment_status,
        )
        return result

    def _load_snapshot(self, request: SettlementRequest) -> SettlementSnapshot:
        invoice = self.invoice_repo.get_fresh(request.invoice_id)
        if not invoice:
            raise InvoiceNotFound(
                f"Invoice {request.invoice_id} not found", invoice_id=request.invoice_id
            )

        version = int(invoice.version)
        if (
            request.expected_invoice_version is not None
            and request.expected_invoice_version != version
        ):
            raise ConcurrencyConflict(
                "Invoice was modified after the settlement was prepared; reload and retry",
                invoice_id=invoice.id,
                expected_version=request.expected_invoice_version,
                current_version=version,
            )

        credit_ids = [application.credit_id for application in request.credit_applications]
        credits = self.credit_repo.get_many_fresh(credit_ids)
        for credit_id in credit_ids:
            if credit_id not in credits:
                raise CreditNotFound(f"Credit {credit_id} not found", credit_id=credit_id)

        return SettlementSnapshot(invoice=invoice, credits=credits, version=version)

    def _plan(self, snapshot: SettlementSnapshot, request: SettlementRequest) -> SettlementPlan:
        invoice = snapshot.invoice
        invoice_currency = Currency(invoice.currency)
        credits = list(snapshot.credits.values())

        self.validator.check_request_shape(request)
        self.validator.check_not_empty(request)
        self.validator.check_credits(invoice, credits)
        self.validator.check_exchange_rate(request, invoice_currency, credits)

        plan = SettlementPlan(remaining_balance=snapshot.remaining_balance)
        for application in request.credit_applications:
            credit = snapshot.credits[application.credit_id]
            converted = self.converter.convert(
                application.amount_in_credit_currency,
                credit.currency,
                invoice_currency,
                request.exchange_rate,
            )
            plan.applications.append(
                PlannedApplication(
                    credit=credit,
                    amount=application.amount_in_credit_currency,
                    converted=converted,
                )
            )
            plan.credits_total += converted

        manual = request.manual_payment
        if manual is not None and manual.amount > 0:
            plan.manual_total = self.converter.convert(
                manual.amount, manual.currency, invoice_currency, request.exchange_rate
            )

        plan.payment_method = self.validator.validate(
            plan.remaining_balance,
            plan.applications,
            plan.credits_total,
            plan.manual_total,
            manual,
        )
        return plan

    def _commit(
        self,
        snapshot: SettlementSnapshot,
        plan: SettlementPlan,
        request: SettlementRequest,
    ) -> tuple[list[CreditConsumption], PaymentRecord | None]:
        invoice = snapshot.invoice
        invoice_currency = Currency(invoice.currency)

        consumptions = []
        for planned in plan.applications:
            cross_currency = self.converter.needs_rate(planned.credit.currency, invoice_currency)
            consumptions.append(
                self.ledger.apply(
                    planned.credit.id,  # type: ignore[arg-type]
                    planned.amount,
                    invoice_id=invoice.id,  # type: ignore[arg-type]
                    session_id=request.session_id,
                    applied_amount=planned.converted,
                    exchange_rate_used=request.exchange_rate if cross_currency else None,
                )
            )

        payment_record = None
        manual = request.manual_payment
        if manual is not None and plan.manual_total > 0:
            cross_currency = self.converter.needs_rate(manual.currency, invoice_currency)
            method = plan.payment_method.code if plan.payment_method else manual.method
            payment_record = self.payment_repo.append(
                invoice_id=invoice.id,  # type: ignore[arg-type]
                session_id=request.session_id,
                amount=manual.amount,
                currency=manual.currency.value,
                method=str(method),
                payment_date=manual.payment_date,
                converted_amount=plan.manual_total,
                exchange_rate_used=request.exchange_rate if cross_currency else None,
            )

        new_paid = Decimal(str(invoice.paid_amount)) + plan.total_applied
        status = self.projector.project(new_paid, Decimal(str(invoice.total)))
        self.invoice_repo.apply_payment(invoice, plan.total_applied, status)

        self.db.commit()
        return consumptions, payment_record

    def _build_result(
        self,
        snapshot: SettlementSnapshot,
        plan: SettlementPlan,
        consumptions: list[CreditConsumption],
        payment_record: PaymentRecord | None,
    ) -> SettlementResult:
        # Attribute access after commit reloads each row, so this is the stored state
        return SettlementResult(
            invoice=InvoiceResponse.model_validate(snapshot.invoice),
            consumed_credits=[
                CreditResponse.model_validate(planned.credit) for planned in plan.applications
            ],
            consumptions=[CreditConsumptionResponse.model_validate(c) for c in consumptions],
            payment_record=(
                PaymentRecordResponse.model_validate(payment_record) if payment_record else None
            ),
            credits_total=plan.credits_total,
            manual_total=plan.manual_total,
            total_applied_in_invoice_currency=plan.total_applied,
        )
