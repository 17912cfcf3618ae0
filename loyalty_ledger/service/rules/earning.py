"""
Earning rules.

Each rule decides on its own whether it applies to a transaction context;
the composite sums every applicable rule.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from loyalty_ledger.domain.exceptions import ValidationException
from loyalty_ledger.domain.value_objects import (
    ConversionRate,
    Money,
    TransactionContext,
)

from .contracts import BaseEarningRule

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def _as_naive_utc(value: datetime) -> datetime:
    """Context timestamps are naive UTC; convert aware bounds to match."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class CategoryMultiplierRule(BaseEarningRule):
    """Multiplies points for purchases in one category."""

    def __init__(
        self,
        category: str,
        multiplier: float,
        base_rate: Optional[ConversionRate] = None,
        priority: int = 100,
    ):
        if not category or not category.strip():
            raise ValidationException("Category cannot be empty")
        super().__init__(multiplier, base_rate, priority)
        self._category = category

    @property
    def category(self) -> str:
        return self._category

    def is_applicable(self, context: TransactionContext) -> bool:
        return context.category == self._category

    @property
    def name(self) -> str:
        return f"category_{self._category}_multiplier"

    @property
    def description(self) -> str:
        return f"{self._multiplier}x points on {self._category} purchases"


class MinimumSpendRule(BaseEarningRule):
    """
    Rewards purchases at or above a minimum spend.

    Only applies when the context carries the purchase amount in the
    same currency as the minimum.
    """

    def __init__(
        self,
        minimum_amount: Money,
        multiplier: float,
        base_rate: Optional[ConversionRate] = None,
        priority: int = 125,
    ):
        super().__init__(multiplier, base_rate, priority)
        self._minimum_amount = minimum_amount

    @property
    def minimum_amount(self) -> Money:
        return self._minimum_amount

    def is_applicable(self, context: TransactionContext) -> bool:
        amount = context.amount
        if amount is None or not amount.has_same_currency(self._minimum_amount):
            return False
        return amount.is_greater_than_or_equal(self._minimum_amount)

    @property
    def name(self) -> str:
        return f"minimum_spend_{self._minimum_amount.amount}"

    @property
    def description(self) -> str:
        return f"{self._multiplier}x points on purchases of {self._minimum_amount} or more"


class TierBonusRule(BaseEarningRule):
    """Bonus points for customers in a loyalty tier."""

    def __init__(
        self,
        tier: str,
        bonus_multiplier: float,
        base_rate: Optional[ConversionRate] = None,
        priority: int = 200,
    ):
        if not tier or not tier.strip():
            raise ValidationException("Tier cannot be empty")
        super().__init__(bonus_multiplier, base_rate, priority)
        self._tier = tier

    @property
    def tier(self) -> str:
        return self._tier

    def is_applicable(self, context: TransactionContext) -> bool:
        return context.tier == self._tier

    @property
    def name(self) -> str:
        return f"tier_{self._tier}_bonus"

    @property
    def description(self) -> str:
        return f"{self._multiplier}x bonus points for {self._tier} members"


class TimeBasedRule(BaseEarningRule):
    """
    Promotion active inside a time window, optionally on given weekdays.

    Both window bounds are inclusive. Weekdays are lowercase English names
    (``"saturday"``); an empty allowlist means every day.
    """

    def __init__(
        self,
        start_time: datetime,
        end_time: datetime,
        multiplier: float,
        base_rate: Optional[ConversionRate] = None,
        days_of_week: Iterable[str] = (),
        priority: int = 150,
    ):
        start_time = _as_naive_utc(start_time)
        end_time = _as_naive_utc(end_time)
        if end_time < start_time:
            raise ValidationException("End time cannot be before start time")
        super().__init__(multiplier, base_rate, priority)
        self._start_time = start_time
        self._end_time = end_time
        self._days_of_week = tuple(day.lower() for day in days_of_week)

        unknown = [day for day in self._days_of_week if day not in WEEKDAY_NAMES]
        if unknown:
            raise ValidationException(f"Unknown weekday names: {', '.join(unknown)}")

    @property
    def start_time(self) -> datetime:
        return self._start_time

    @property
    def end_time(self) -> datetime:
        return self._end_time

    @property
    def days_of_week(self) -> tuple:
        return self._days_of_week

    def is_applicable(self, context: TransactionContext) -> bool:
        timestamp = _as_naive_utc(context.timestamp)

        if timestamp < self._start_time or timestamp > self._end_time:
            return False

        if not self._days_of_week:
            return True

        return WEEKDAY_NAMES[timestamp.weekday()] in self._days_of_week

    @property
    def name(self) -> str:
        start = self._start_time.strftime("%Y-%m-%d %H:%M")
        end = self._end_time.strftime("%Y-%m-%d %H:%M")
        return f"time_based_{start}_{end}"

    @property
    def description(self) -> str:
        window = f"{self._start_time:%Y-%m-%d %H:%M} to {self._end_time:%Y-%m-%d %H:%M}"
        if self._days_of_week:
            days = ", ".join(day.capitalize() for day in self._days_of_week)
            return f"{self._multiplier}x points from {window} on {days}"
        return f"{self._multiplier}x points from {window}"
