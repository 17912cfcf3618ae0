"""Points value object."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from loyalty_ledger.domain.exceptions import ValidationException


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Points:
    """
    A non-negative whole number of loyalty points.

    Arithmetic never produces a negative value: subtracting more than
    is held raises instead of clamping.
    """

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationException(f"Points must be an integer, got {self.value!r}")
        if self.value < 0:
            raise ValidationException("Points cannot be negative")

    @classmethod
    def zero(cls) -> "Points":
        return cls(0)

    @classmethod
    def of(cls, value: int) -> "Points":
        return cls(value)

    def add(self, other: "Points") -> "Points":
        return Points(self.value + other.value)

    def subtract(self, other: "Points") -> "Points":
        result = self.value - other.value
        if result < 0:
            raise ValidationException(
                f"Cannot subtract more points than available: {other.value} > {self.value}"
            )
        return Points(result)

    def multiply(self, multiplier: float) -> "Points":
        if multiplier < 0:
            raise ValidationException("Multiplier cannot be negative")
        return Points(round_half_up(self.value * multiplier))

    def divide(self, divisor: float) -> "Points":
        if divisor <= 0:
            raise ValidationException("Divisor must be positive")
        return Points(round_half_up(self.value / divisor))

    def percentage(self, percentage: float) -> "Points":
        if percentage < 0 or percentage > 100:
            raise ValidationException("Percentage must be between 0 and 100")
        return Points(round_half_up(self.value * (percentage / 100)))

    def is_greater_than(self, other: "Points") -> bool:
        return self.value > other.value

    def is_greater_than_or_equal(self, other: "Points") -> bool:
        return self.value >= other.value

    def is_less_than(self, other: "Points") -> bool:
        return self.value < other.value

    def is_zero(self) -> bool:
        return self.value == 0

    def __lt__(self, other: "Points") -> bool:
        return self.value < other.value

    def __le__(self, other: "Points") -> bool:
        return self.value <= other.value

    def __gt__(self, other: "Points") -> bool:
        return self.value > other.value

    def __ge__(self, other: "Points") -> bool:
        return self.value >= other.value

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value:,} points"
