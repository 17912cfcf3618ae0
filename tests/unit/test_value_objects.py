"""
Unit tests for ledger value objects.

These tests verify:
1. Points arithmetic stays non-negative and rounds half away from zero
2. Money enforces currency matching and converts to points
3. Currency parsing and metadata
4. ConversionRate construction
5. TransactionContext immutability and derivation
"""

from datetime import datetime

import pytest

from loyalty_ledger.domain.exceptions import ValidationException
from loyalty_ledger.domain.value_objects import (
    AMOUNT_CONTEXT_KEY,
    ConversionRate,
    Currency,
    Money,
    Points,
    TransactionContext,
    round_half_up,
)


# =============================================================================
# Points
# =============================================================================

class TestPoints:
    """Tests for the Points value object."""

    @pytest.mark.parametrize("a,b", [(0, 0), (1, 2), (150, 850), (10_000, 1)])
    def test_add_sums_values(self, a, b):
        assert Points(a).add(Points(b)).value == a + b

    def test_subtract_within_balance(self):
        assert Points(500).subtract(Points(200)).value == 300
        assert Points(500).subtract(Points(500)).is_zero()

    def test_subtract_below_zero_raises(self):
        with pytest.raises(ValidationException):
            Points(100).subtract(Points(101))

    def test_negative_points_rejected(self):
        with pytest.raises(ValidationException, match="cannot be negative"):
            Points(-1)

    def test_non_integer_points_rejected(self):
        with pytest.raises(ValidationException):
            Points(1.5)
        with pytest.raises(ValidationException):
            Points(True)

    def test_multiply_rounds_half_away_from_zero(self):
        assert Points(5).multiply(1.5).value == 8
        assert Points(3).multiply(0.5).value == 2
        assert Points(100).multiply(2.0).value == 200

    def test_negative_multiplier_rejected(self):
        with pytest.raises(ValidationException):
            Points(10).multiply(-1)

    def test_divide(self):
        assert Points(10).divide(4).value == 3
        with pytest.raises(ValidationException):
            Points(10).divide(0)

    def test_percentage(self):
        assert Points(1000).percentage(15).value == 150
        with pytest.raises(ValidationException):
            Points(1000).percentage(101)

    def test_comparisons(self):
        assert Points(10).is_greater_than(Points(5))
        assert Points(10).is_greater_than_or_equal(Points(10))
        assert Points(5).is_less_than(Points(10))
        assert min(Points(7), Points(3)) == Points(3)

    def test_str_formats_thousands(self):
        assert str(Points(1000)) == "1,000 points"

    def test_round_half_up_is_symmetric(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -3
        assert round_half_up(2.4999) == 2


# =============================================================================
# Currency
# =============================================================================

class TestCurrency:
    """Tests for Currency parsing and metadata."""

    def test_from_code_normalizes_case_and_whitespace(self):
        assert Currency.from_code(" usd ") is Currency.USD

    def test_unsupported_code_rejected(self):
        with pytest.raises(ValidationException, match="Unsupported"):
            Currency.from_code("XYZ")

    def test_wrong_length_rejected(self):
        with pytest.raises(ValidationException, match="3 characters"):
            Currency.from_code("US")

    def test_metadata(self):
        assert Currency.USD.symbol == "$"
        assert Currency.NGN.symbol == "₦"
        assert Currency.JPY.decimals == 0
        assert Currency.EUR.display_name == "Euro"

    def test_format_amount(self):
        assert Currency.USD.format_amount(1234.5) == "$1,234.50"
        assert Currency.JPY.format_amount(1500) == "¥1,500"
        assert Currency.GBP.format_amount(3, include_symbol=False) == "3.00"

    def test_supported_codes(self):
        assert Currency.supported_codes() == ["USD", "EUR", "GBP", "CAD", "AUD", "JPY", "NGN"]


# =============================================================================
# Money
# =============================================================================

class TestMoney:
    """Tests for the Money value object."""

    @pytest.mark.parametrize("dollars", [0.01, 0.1, 1.0, 19.99, 99.99, 1234.56])
    def test_from_dollars_round_trip(self, dollars):
        assert Money.from_dollars(dollars, Currency.USD).to_dollars() == dollars

    def test_from_dollars_uses_currency_decimals(self):
        assert Money.from_dollars(99.99, Currency.USD).amount == 9999
        assert Money.from_dollars(1500, Currency.JPY).amount == 1500

    def test_add_same_currency(self):
        total = Money(1000, Currency.USD).add(Money(250, Currency.USD))
        assert total == Money(1250, Currency.USD)

    @pytest.mark.parametrize("a,b", [(0, 0), (100, 100), (5, 99999)])
    def test_add_different_currency_always_fails(self, a, b):
        with pytest.raises(ValidationException, match="different currencies"):
            Money(a, Currency.USD).add(Money(b, Currency.EUR))

    def test_subtract_below_zero_raises(self):
        with pytest.raises(ValidationException):
            Money(100, Currency.USD).subtract(Money(101, Currency.USD))

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationException):
            Money(-1, Currency.USD)

    def test_currency_code_is_coerced(self):
        assert Money(100, "eur").currency is Currency.EUR

    def test_convert_to_points(self):
        assert Money(10_000, Currency.USD).convert_to_points(ConversionRate.standard()) == Points(10_000)
        assert Money(333, Currency.USD).convert_to_points(ConversionRate(0.5)) == Points(167)

    def test_from_string(self):
        assert Money.from_string("$1,234.50", Currency.USD).amount == 123450
        with pytest.raises(ValidationException):
            Money.from_string("abc", Currency.USD)

    @pytest.mark.parametrize("text", ["-5.00", "$-5.00", "-$5.00"])
    def test_from_string_rejects_negative(self, text):
        with pytest.raises(ValidationException, match="negative"):
            Money.from_string(text, Currency.USD)

    @pytest.mark.parametrize("dollars", [float("nan"), float("inf")])
    def test_from_dollars_rejects_non_finite(self, dollars):
        with pytest.raises(ValidationException):
            Money.from_dollars(dollars, Currency.USD)

    def test_comparisons_require_same_currency(self):
        assert Money(200, Currency.USD).is_greater_than(Money(100, Currency.USD))
        with pytest.raises(ValidationException):
            Money(200, Currency.USD).is_greater_than(Money(100, Currency.GBP))

    def test_str_and_to_dict(self):
        money = Money(5000, Currency.USD)
        assert str(money) == "$50.00"
        assert money.to_dict() == {
            "amount_cents": 5000,
            "amount_dollars": 50.0,
            "currency": "USD",
            "formatted": "$50.00",
        }


# =============================================================================
# ConversionRate
# =============================================================================

class TestConversionRate:
    """Tests for ConversionRate."""

    @pytest.mark.parametrize("multiplier", [0, -0.5])
    def test_non_positive_rejected(self, multiplier):
        with pytest.raises(ValidationException):
            ConversionRate(multiplier)

    @pytest.mark.parametrize("multiplier", [float("nan"), float("inf")])
    def test_non_finite_rejected(self, multiplier):
        with pytest.raises(ValidationException):
            ConversionRate(multiplier)

    def test_from_ratio(self):
        assert ConversionRate.from_ratio(100, 1).multiplier == pytest.approx(0.01)
        with pytest.raises(ValidationException):
            ConversionRate.from_ratio(0, 1)

    def test_inverse(self):
        assert ConversionRate(4.0).inverse().is_equivalent(ConversionRate(0.25))

    def test_str(self):
        assert str(ConversionRate.standard()) == "x1.0"


# =============================================================================
# TransactionContext
# =============================================================================

class TestTransactionContext:
    """Tests for TransactionContext."""

    def test_earning_factory(self):
        context = TransactionContext.earning(category="electronics", source="pos", tier="gold")
        assert context.category == "electronics"
        assert context.source == "pos"
        assert context.tier == "gold"

    def test_redemption_factory(self):
        assert TransactionContext.redemption().get("type") == "redemption"

    def test_data_is_read_only(self):
        context = TransactionContext.create({"category": "books"})
        with pytest.raises(TypeError):
            context.data["category"] = "electronics"

    def test_caller_dict_changes_do_not_leak(self):
        data = {"category": "books"}
        context = TransactionContext.create(data)
        data["category"] = "electronics"
        assert context.category == "books"

    def test_with_value_returns_new_context_with_same_timestamp(self):
        original = TransactionContext.create({"category": "books"})
        derived = original.with_value("tier", "gold")

        assert "tier" not in original
        assert derived.tier == "gold"
        assert derived.category == "books"
        assert derived.timestamp == original.timestamp

    def test_merge_overrides_keys(self):
        context = TransactionContext.create({"category": "books", "tier": "silver"})
        merged = context.merge({"tier": "gold", "source": "web"})
        assert merged.tier == "gold"
        assert merged.source == "web"
        assert merged.category == "books"

    def test_equality_ignores_insertion_order(self):
        timestamp = datetime(2024, 1, 1, 12, 0)
        a = TransactionContext({"a": 1, "b": 2}, timestamp=timestamp)
        b = TransactionContext({"b": 2, "a": 1}, timestamp=timestamp)
        assert a == b

    def test_amount_property_only_returns_money(self):
        money = Money(100, Currency.USD)
        assert TransactionContext.create({AMOUNT_CONTEXT_KEY: money}).amount == money
        assert TransactionContext.create({AMOUNT_CONTEXT_KEY: 100}).amount is None

    def test_to_dict_and_from_dict(self):
        timestamp = datetime(2024, 3, 1, 9, 30)
        context = TransactionContext({"category": "books", "count": 3}, timestamp=timestamp)

        restored = TransactionContext.from_dict(context.to_dict())

        assert restored == context

    def test_to_dict_serializes_money(self):
        context = TransactionContext.create({AMOUNT_CONTEXT_KEY: Money(250, Currency.USD)})
        assert context.to_dict()["data"]["amount"]["amount_cents"] == 250
