"""Tests for Currency and CurrencyConverter."""

from decimal import Decimal

import pytest

from clinic_billing.core.exceptions import InvalidRate, MissingExchangeRate
from clinic_billing.models.currency import Currency
from clinic_billing.services.currency import CurrencyConverter


@pytest.fixture
def converter():
    return CurrencyConverter(primary=Currency.USD, secondary=Currency.UYU)


class TestCurrency:
    def test_currency_is_str_enum(self):
        """Test Currency members are strings."""
        assert isinstance(Currency.USD, str)
        assert Currency.USD == "USD"
        assert Currency.UYU.value == "UYU"

    def test_only_two_currencies(self):
        """Test exactly the two desk currencies are supported."""
        assert {c.value for c in Currency} == {"USD", "UYU"}

    def test_invalid_currency_raises(self):
        """Test that an unknown currency code raises ValueError."""
        with pytest.raises(ValueError):
            Currency("EUR")


class TestConvert:
    def test_identity_returns_amount_unchanged(self, converter):
        """Test same-currency conversion is the identity."""
        assert converter.convert(Decimal("12.345"), "USD", "USD", Decimal("40")) == Decimal(
            "12.345"
        )

    def test_identity_ignores_missing_or_invalid_rate(self, converter):
        """Test identity conversion never looks at the rate."""
        assert converter.convert(Decimal("10"), Currency.UYU, Currency.UYU, None) == Decimal("10")
        assert converter.convert(Decimal("10"), Currency.USD, Currency.USD, Decimal("0")) == Decimal(
            "10"
        )

    def test_primary_to_secondary_multiplies(self, converter):
        """Test USD -> UYU is amount * rate."""
        assert converter.convert(Decimal("50"), "USD", "UYU", Decimal("40")) == Decimal("2000")

    def test_secondary_to_primary_divides(self, converter):
        """Test UYU -> USD is amount / rate."""
        assert converter.convert(Decimal("2000"), "UYU", "USD", Decimal("40")) == Decimal("50")

    def test_result_is_quantized(self, converter):
        """Test non-terminating divisions are rounded to the storage scale."""
        result = converter.convert(Decimal("100"), "UYU", "USD", Decimal("3"))
        assert result == Decimal("33.3333")
        assert result.as_tuple().exponent == -4

    def test_half_up_rounding(self, converter):
        """Test ties are rounded away from zero."""
        assert converter.convert(Decimal("1"), "UYU", "USD", Decimal("8")) == Decimal("0.1250")
        assert converter.convert(Decimal("0.00005"), "USD", "UYU", Decimal("1")) == Decimal(
            "0.0001"
        )

    @pytest.mark.parametrize("rate", [Decimal("0"), Decimal("-40")])
    def test_non_positive_rate_raises(self, converter, rate):
        """Test a zero or negative rate is rejected for real conversions."""
        with pytest.raises(InvalidRate) as exc_info:
            converter.convert(Decimal("10"), "USD", "UYU", rate)
        assert exc_info.value.details["exchange_rate"] == str(rate)

    def test_missing_rate_raises(self, converter):
        """Test a cross-currency conversion without a rate fails."""
        with pytest.raises(MissingExchangeRate):
            converter.convert(Decimal("10"), "UYU", "USD", None)

    def test_needs_rate(self, converter):
        """Test needs_rate only for different currencies."""
        assert converter.needs_rate("USD", "UYU") is True
        assert converter.needs_rate(Currency.UYU, "UYU") is False

    def test_same_primary_and_secondary_rejected(self):
        """Test the converter refuses a degenerate currency pair."""
        with pytest.raises(ValueError):
            CurrencyConverter(primary="USD", secondary="USD")

    def test_defaults_come_from_settings(self):
        """Test primary/secondary default to USD/UYU."""
        converter = CurrencyConverter()
        assert converter.primary == Currency.USD
        assert converter.secondary == Currency.UYU


class TestRoundTrip:
    def test_round_trip_at_session_rate(self, converter):
        """Test USD -> UYU -> USD returns the original amount."""
        rate = Decimal("40")
        there = converter.convert(Decimal("100"), "USD", "UYU", rate)
        back = converter.convert(there, "UYU", "USD", rate)
        assert abs(back - Decimal("100")) <= Decimal("0.01")

    @pytest.mark.parametrize(
        "amount,rate",
        [
            (Decimal("0.01"), Decimal("39.875")),
            (Decimal("123.45"), Decimal("41.3")),
            (Decimal("9999.99"), Decimal("38.9")),
            (Decimal("7"), Decimal("0.0250")),
        ],
    )
    def test_round_trip_within_epsilon(self, converter, amount, rate):
        """Test round trips stay within one cent in both directions."""
        back = converter.convert(converter.convert(amount, "USD", "UYU", rate), "UYU", "USD", rate)
        assert abs(back - amount) <= Decimal("0.01")
        back = converter.convert(converter.convert(amount, "UYU", "USD", rate), "USD", "UYU", rate)
        assert abs(back - amount) <= Decimal("0.01")
