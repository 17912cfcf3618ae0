"""Contracts shared by every earning and redemption rule."""

from abc import ABC, abstractmethod
from typing import Optional

from loyalty_ledger.domain.exceptions import ValidationException
from loyalty_ledger.domain.value_objects import (
    ConversionRate,
    Money,
    Points,
    TransactionContext,
)


class EarningRule(ABC):
    """
    Decides how many points a purchase earns.

    Implementations must be side-effect free and deterministic for a
    given amount and context.
    """

    @abstractmethod
    def calculate_points(self, amount: Money, context: TransactionContext) -> Points:
        ...

    @abstractmethod
    def is_applicable(self, context: TransactionContext) -> bool:
        ...

    @property
    @abstractmethod
    def priority(self) -> int:
        """Higher priorities are evaluated first."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} priority={self.priority}>"


class RedemptionRule(ABC):
    """Decides whether points can be redeemed and what they are worth."""

    @abstractmethod
    def can_redeem(self, points: Points, context: TransactionContext) -> bool:
        ...

    @abstractmethod
    def calculate_value(self, points: Points, context: TransactionContext) -> Money:
        ...

    @property
    @abstractmethod
    def minimum_points(self) -> Points:
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...


class BaseEarningRule(EarningRule):
    """
    Earning rule with a base conversion rate and a multiplier.

    Points are computed in two rounded steps: the amount in minor units is
    converted with the base rate, then the multiplier is applied.
    """

    def __init__(
        self,
        multiplier: float,
        base_rate: Optional[ConversionRate] = None,
        priority: int = 100,
    ):
        if multiplier <= 0:
            raise ValidationException("Rule multiplier must be positive")
        self._multiplier = float(multiplier)
        self._base_rate = base_rate or ConversionRate.standard()
        self._priority = priority

    @property
    def multiplier(self) -> float:
        return self._multiplier

    @property
    def base_rate(self) -> ConversionRate:
        return self._base_rate

    @property
    def priority(self) -> int:
        return self._priority

    def calculate_points(self, amount: Money, context: TransactionContext) -> Points:
        base_points = amount.convert_to_points(self._base_rate)
        return base_points.multiply(self._multiplier)
