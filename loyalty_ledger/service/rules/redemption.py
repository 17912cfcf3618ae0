"""Redemption rules."""

from loyalty_ledger.domain.exceptions import ValidationException
from loyalty_ledger.domain.value_objects import (
    Currency,
    Money,
    Points,
    TransactionContext,
)

from .contracts import RedemptionRule


class BasicRedemptionRule(RedemptionRule):
    """
    Fixed-rate redemption: ``points_per_unit`` points are worth one major
    currency unit, above a minimum redeemable amount.
    """

    def __init__(
        self,
        currency: Currency,
        points_per_unit: int = 100,
        minimum_points: int = 100,
    ):
        if points_per_unit <= 0:
            raise ValidationException("Points per unit must be positive")
        if minimum_points < 0:
            raise ValidationException("Minimum points cannot be negative")
        self._currency = currency
        self._points_per_unit = points_per_unit
        self._minimum_points = Points(minimum_points)

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def points_per_unit(self) -> int:
        return self._points_per_unit

    @property
    def minimum_points(self) -> Points:
        return self._minimum_points

    def can_redeem(self, points: Points, context: TransactionContext) -> bool:
        return points.is_greater_than_or_equal(self._minimum_points)

    def calculate_value(self, points: Points, context: TransactionContext) -> Money:
        return Money.from_dollars(points.value / self._points_per_unit, self._currency)

    @property
    def name(self) -> str:
        return f"basic_redemption_{self._currency.code}_{self._points_per_unit}"

    @property
    def description(self) -> str:
        return (
            f"{self._points_per_unit} points = {self._currency.format_amount(1)}, "
            f"minimum {self._minimum_points}"
        )
