"""Payment method catalog: which tenders a cashier may record."""

from uuid import UUID

from sqlalchemy.orm import Session

from clinic_billing.core.exceptions import MissingPaymentMethod, UnknownPaymentMethod
from clinic_billing.models.payment_method import PaymentMethod
from clinic_billing.repositories.payment_method_repository import PaymentMethodRepository

# (code, name, is_cash_equivalent)
DEFAULT_PAYMENT_METHODS = [
    ("CASH", "Efectivo", True),
    ("BANK_TRANSFER", "Transferencia bancaria", False),
    ("CREDIT_CARD", "Tarjeta de crédito", False),
    ("DEBIT_CARD", "Tarjeta de débito", False),
    ("MOBILE_PAYMENT", "Pago móvil", False),
    ("MERCADO_PAGO", "Mercado Pago", False),
]

# Checked in order; the first keyword found in a label wins
_LABEL_KEYWORDS = [
    (("efectivo", "cash"), "CASH"),
    (("debit", "débito", "debito"), "DEBIT_CARD"),
    (("credit", "crédito", "credito"), "CREDIT_CARD"),
    (("transfer", "banco", "bank"), "BANK_TRANSFER"),
    (("mercado pago", "mercado_pago", "mercadopago"), "MERCADO_PAGO"),
    (("mobile", "móvil", "movil"), "MOBILE_PAYMENT"),
]


def normalize_code(label: str | None) -> str | None:
    """Map a free-text method label onto a catalog code.

    Returns ``None`` when the label matches nothing known.
    """
    if not label:
        return None
    text = label.strip().lower()
    if not text:
        return None

    upper = text.upper()
    if any(upper == code for code, _, _ in DEFAULT_PAYMENT_METHODS):
        return upper

    for keywords, code in _LABEL_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return code
    return None


class PaymentMethodCatalog:
    """Enumerates and resolves payment methods."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentMethodRepository(db)

    def list_active(self) -> list[PaymentMethod]:
        return self.repo.get_all(active_only=True)

    def seed_defaults(self) -> list[PaymentMethod]:
        """Create the standard methods that do not exist yet."""
        created = []
        for code, name, is_cash_equivalent in DEFAULT_PAYMENT_METHODS:
            if self.repo.get_by_code(code) is None:
                created.append(self.repo.create(code, name, is_cash_equivalent))
        return created

    def resolve(self, method: str | None) -> PaymentMethod:
        """Return the active catalog entry for a method id, code or label.

        Raises:
            MissingPaymentMethod: If no method was given.
            UnknownPaymentMethod: If it matches no active catalog entry.
        """
        if method is None or not method.strip():
            raise MissingPaymentMethod("A payment method is required for a manual payment")

        payment_method = self._lookup(method.strip())
        if payment_method is None or not payment_method.is_active:
            raise UnknownPaymentMethod(
                f"Payment method '{method}' is not available",
                method=method,
                available=[pm.code for pm in self.list_active()],
            )
        return payment_method

    def _lookup(self, method: str) -> PaymentMethod | None:
        try:
            method_id = UUID(method)
        except ValueError:
            method_id = None
        if method_id is not None:
            return self.repo.get_by_id(method_id)

        found = self.repo.get_by_code(method)
        if found is not None:
            return found

        code = normalize_code(method)
        if code is None:
            return None
        return self.repo.get_by_code(code)
