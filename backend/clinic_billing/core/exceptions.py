"""Settlement error taxonomy.

Every failure of a settlement attempt is reported through one of these
exceptions. Each carries a stable ``code``, a human readable ``message`` and a
``details`` mapping with the quantities involved. Amounts and ids are rendered
as strings so the payload serializes to JSON as is, without float rounding.
"""

from decimal import Decimal
from typing import Any
from uuid import UUID


def _render(value: Any) -> Any:
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    return value


class SettlementError(Exception):
    """Base class for all settlement failures."""

    code = "settlement_error"
    retryable = False

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = {key: _render(value) for key, value in details.items()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


class ValidationError(SettlementError):
    """The request is malformed or references something that does not exist."""

    code = "validation_error"


class InvoiceNotFound(ValidationError):
    code = "invoice_not_found"


class CreditNotFound(ValidationError):
    code = "credit_not_found"


class InsufficientCredit(SettlementError):
    """A credit application exceeds the credit's available balance."""

    code = "insufficient_credit"


class OverAllocatedCredits(SettlementError):
    """Credits alone exceed the invoice's remaining balance."""

    code = "over_allocated_credits"


class Overpayment(SettlementError):
    """Credits plus manual payment exceed the invoice's remaining balance."""

    code = "overpayment"


class MissingPaymentMethod(SettlementError):
    code = "missing_payment_method"


class UnknownPaymentMethod(MissingPaymentMethod):
    code = "unknown_payment_method"


class MissingExchangeRate(SettlementError):
    code = "missing_exchange_rate"


class InvalidRate(SettlementError):
    code = "invalid_rate"


class EmptySettlement(SettlementError):
    code = "empty_settlement"


class ConcurrencyConflict(SettlementError):
    """The loaded snapshot went stale before commit. Reload and resubmit."""

    code = "concurrency_conflict"
    retryable = True


class NoActiveSession(SettlementError):
    """Raised by the cash session collaborator; never by the engine itself."""

    code = "no_active_session"


class CollaboratorError(SettlementError):
    """A collaborator answered with a payload that could not be parsed."""

    code = "collaborator_error"
