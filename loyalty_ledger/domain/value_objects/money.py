"""Money value object."""

import math
import re
from dataclasses import dataclass

from loyalty_ledger.domain.exceptions import ValidationException

from .conversion_rate import ConversionRate
from .currency import Currency
from .points import Points, round_half_up


@dataclass(frozen=True)
class Money:
    """
    A non-negative amount of money in minor units (e.g. cents).

    Arithmetic and comparisons between different currencies are rejected.
    """

    amount: int
    currency: Currency

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationException(f"Money amount must be an integer, got {self.amount!r}")
        if self.amount < 0:
            raise ValidationException("Money amount cannot be negative")
        if not isinstance(self.currency, Currency):
            object.__setattr__(self, "currency", Currency.from_code(str(self.currency)))

    @classmethod
    def zero(cls, currency: Currency) -> "Money":
        return cls(0, currency)

    @classmethod
    def from_cents(cls, cents: int, currency: Currency) -> "Money":
        return cls(cents, currency)

    @classmethod
    def from_dollars(cls, dollars: float, currency: Currency) -> "Money":
        """Build from an amount in major units (dollars, euros, yen...)."""
        if not math.isfinite(dollars):
            raise ValidationException(f"Money amount must be finite, got {dollars!r}")
        factor = 10 ** currency.decimals
        return cls(round_half_up(dollars * factor), currency)

    @classmethod
    def from_string(cls, amount: str, currency: Currency) -> "Money":
        """Parse a display string such as ``"$1,234.50"``."""
        if "-" in amount:
            raise ValidationException(f"Money amount cannot be negative: {amount!r}")
        cleaned = re.sub(r"[^\d.]", "", amount)
        if not cleaned:
            raise ValidationException(f"Cannot parse money amount: {amount!r}")
        try:
            dollars = float(cleaned)
        except ValueError:
            raise ValidationException(f"Cannot parse money amount: {amount!r}")
        return cls.from_dollars(dollars, currency)

    def to_dollars(self) -> float:
        """Amount in major units."""
        return self.amount / 10 ** self.currency.decimals

    def add(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        if self.amount < other.amount:
            raise ValidationException("Cannot subtract more money than available")
        return Money(self.amount - other.amount, self.currency)

    def multiply(self, multiplier: float) -> "Money":
        if multiplier < 0:
            raise ValidationException("Multiplier cannot be negative")
        return Money(round_half_up(self.amount * multiplier), self.currency)

    def divide(self, divisor: float) -> "Money":
        if divisor <= 0:
            raise ValidationException("Divisor must be positive")
        return Money(round_half_up(self.amount / divisor), self.currency)

    def percentage(self, percentage: float) -> "Money":
        if percentage < 0 or percentage > 100:
            raise ValidationException("Percentage must be between 0 and 100")
        return Money(round_half_up(self.amount * (percentage / 100)), self.currency)

    def convert_to_points(self, rate: ConversionRate) -> Points:
        return Points(round_half_up(self.amount * rate.multiplier))

    def is_greater_than(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def is_greater_than_or_equal(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def is_less_than(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def is_zero(self) -> bool:
        return self.amount == 0

    def has_same_currency(self, other: "Money") -> bool:
        return self.currency == other.currency

    def _assert_same_currency(self, other: "Money") -> None:
        if not self.has_same_currency(other):
            raise ValidationException(
                f"Cannot operate on different currencies: {self.currency} vs {other.currency}"
            )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "amount_cents": self.amount,
            "amount_dollars": self.to_dollars(),
            "currency": self.currency.code,
            "formatted": str(self),
        }

    def __str__(self) -> str:
        return self.currency.format_amount(self.to_dollars())
