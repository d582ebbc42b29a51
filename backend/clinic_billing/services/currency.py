"""Conversion between the two currencies the clinic operates in."""

from decimal import ROUND_HALF_UP, Decimal

from clinic_billing.core.config import settings
from clinic_billing.core.exceptions import InvalidRate, MissingExchangeRate, ValidationError
from clinic_billing.models.currency import Currency


class CurrencyConverter:
    """Converts amounts given a scalar rate.

    The rate is always quoted as units of the secondary currency per one unit
    of the primary currency (e.g. 40 UYU per USD). Identity conversions never
    look at the rate.
    """

    def __init__(
        self,
        primary: Currency | str | None = None,
        secondary: Currency | str | None = None,
        quantum: Decimal | None = None,
    ) -> None:
        self.primary = Currency(primary or settings.PRIMARY_CURRENCY)
        self.secondary = Currency(secondary or settings.SECONDARY_CURRENCY)
        self.quantum = quantum if quantum is not None else settings.MONEY_QUANTUM
        if self.primary == self.secondary:
            raise ValueError("Primary and secondary currencies must differ")

    def needs_rate(self, from_currency: Currency | str, to_currency: Currency | str) -> bool:
        return Currency(from_currency) != Currency(to_currency)

    def convert(
        self,
        amount: Decimal,
        from_currency: Currency | str,
        to_currency: Currency | str,
        rate: Decimal | None,
    ) -> Decimal:
        source = Currency(from_currency)
        target = Currency(to_currency)
        if source == target:
            return amount

        if rate is None:
            raise MissingExchangeRate(
                f"An exchange rate is required to convert {source.value} to {target.value}",
                from_currency=source.value,
                to_currency=target.value,
            )
        if rate <= 0:
            raise InvalidRate(
                f"Exchange rate must be positive, got {rate}",
                exchange_rate=rate,
            )

        if source == self.primary and target == self.secondary:
            converted = amount * rate
        elif source == self.secondary and target == self.primary:
            converted = amount / rate
        else:
            raise ValidationError(
                f"Unsupported conversion {source.value} -> {target.value}",
                from_currency=source.value,
                to_currency=target.value,
            )
        return converted.quantize(self.quantum, rounding=ROUND_HALF_UP)
