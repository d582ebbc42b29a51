"""Business rules a proposed settlement must satisfy before anything is written."""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from clinic_billing.core.config import settings
from clinic_billing.core.exceptions import (
    EmptySettlement,
    InsufficientCredit,
    InvalidRate,
    MissingExchangeRate,
    MissingPaymentMethod,
    OverAllocatedCredits,
    Overpayment,
    ValidationError,
)
from clinic_billing.models.credit import Credit
from clinic_billing.models.currency import Currency
from clinic_billing.models.invoice import Invoice
from clinic_billing.models.payment_method import PaymentMethod
from clinic_billing.schemas.settlement import ManualPayment, SettlementRequest
from clinic_billing.services.payment_methods import PaymentMethodCatalog


@dataclass(frozen=True)
class PlannedApplication:
    """A credit application with its amount already converted to invoice currency."""

    credit: Credit
    amount: Decimal
    converted: Decimal


class SettlementValidator:
    """Checks a proposed settlement against the invoice and credit snapshot.

    Each check raises the matching ``SettlementError`` subclass with the
    numbers involved; none of them touch the database beyond looking up the
    payment method catalog.
    """

    def __init__(
        self,
        epsilon: Decimal | None = None,
        payment_methods: PaymentMethodCatalog | None = None,
    ) -> None:
        self.epsilon = epsilon if epsilon is not None else settings.SETTLEMENT_EPSILON
        self.payment_methods = payment_methods

    def check_request_shape(self, request: SettlementRequest) -> None:
        seen = set()
        for application in request.credit_applications:
            if application.credit_id in seen:
                raise ValidationError(
                    f"Credit {application.credit_id} is listed more than once",
                    credit_id=application.credit_id,
                )
            seen.add(application.credit_id)
            if application.amount_in_credit_currency <= 0:
                raise ValidationError(
                    "Credit applications must be positive",
                    credit_id=application.credit_id,
                    amount=application.amount_in_credit_currency,
                )

        if request.manual_payment is not None and request.manual_payment.amount < 0:
            raise ValidationError(
                "Manual payment amount cannot be negative",
                amount=request.manual_payment.amount,
            )

    def check_not_empty(self, request: SettlementRequest) -> None:
        if not request.credit_applications and request.manual_amount <= 0:
            raise EmptySettlement("Nothing to settle: no credits and no manual payment")

    def check_credits(self, invoice: Invoice, credits: Sequence[Credit]) -> None:
        for credit in credits:
            if credit.payer_id != invoice.payer_id:
                raise ValidationError(
                    f"Credit {credit.id} does not belong to the invoice's payer",
                    credit_id=credit.id,
                    invoice_id=invoice.id,
                )

    def check_exchange_rate(
        self,
        request: SettlementRequest,
        invoice_currency: Currency,
        credits: Sequence[Credit],
    ) -> None:
        """Require a usable rate whenever a positive amount must change currency."""
        foreign = [
            credit.currency for credit in credits if Currency(credit.currency) != invoice_currency
        ]
        if (
            request.manual_payment is not None
            and request.manual_payment.amount > 0
            and request.manual_payment.currency != invoice_currency
        ):
            foreign.append(request.manual_payment.currency.value)
        if not foreign:
            return

        if request.exchange_rate is None:
            raise MissingExchangeRate(
                f"An exchange rate is required to settle a {invoice_currency.value} invoice "
                f"with {', '.join(sorted(set(foreign)))}",
                invoice_currency=invoice_currency.value,
            )
        if request.exchange_rate <= 0:
            raise InvalidRate(
                f"Exchange rate must be positive, got {request.exchange_rate}",
                exchange_rate=request.exchange_rate,
            )

    def check_payment_method(self, manual_payment: ManualPayment | None) -> PaymentMethod | None:
        """A method is only required when money actually changes hands."""
        if manual_payment is None or manual_payment.amount <= 0:
            return None
        if manual_payment.method is None or not manual_payment.method.strip():
            raise MissingPaymentMethod(
                "A payment method is required when the manual amount is positive",
                amount=manual_payment.amount,
            )
        if self.payment_methods is None:
            return None
        return self.payment_methods.resolve(manual_payment.method)

    def check_amounts(
        self,
        remaining_balance: Decimal,
        applications: Sequence[PlannedApplication],
        credits_total: Decimal,
        manual_total: Decimal,
    ) -> None:
        # Credits are drawn exactly; epsilon only absorbs noise on the invoice side
        for planned in applications:
            balance = Decimal(str(planned.credit.available_balance))
            if planned.amount > balance:
                raise InsufficientCredit(
                    f"Amount {planned.amount} exceeds available balance {balance} "
                    f"of credit {planned.credit.id}",
                    credit_id=planned.credit.id,
                    requested=planned.amount,
                    available_balance=balance,
                )

        if credits_total > remaining_balance + self.epsilon:
            raise OverAllocatedCredits(
                f"Credits total {credits_total} exceeds remaining balance {remaining_balance}",
                remaining_balance=remaining_balance,
                credits_total=credits_total,
            )

        attempted_total = credits_total + manual_total
        if attempted_total > remaining_balance + self.epsilon:
            raise Overpayment(
                f"Credits plus payment {attempted_total} exceed remaining balance "
                f"{remaining_balance}",
                remaining_balance=remaining_balance,
                credits_total=credits_total,
                manual_total=manual_total,
                attempted_total=attempted_total,
            )

    def validate(
        self,
        remaining_balance: Decimal,
        applications: Sequence[PlannedApplication],
        credits_total: Decimal,
        manual_total: Decimal,
        manual_payment: ManualPayment | None = None,
    ) -> PaymentMethod | None:
        """Run the amount and payment method rules; returns the resolved method."""
        self.check_amounts(remaining_balance, applications, credits_total, manual_total)
        return self.check_payment_method(manual_payment)
