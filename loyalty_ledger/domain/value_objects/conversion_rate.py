"""Conversion rate between money minor units and points."""

import math
from dataclasses import dataclass

from loyalty_ledger.domain.exceptions import ValidationException


@dataclass(frozen=True)
class ConversionRate:
    """
    Multiplier applied to a money amount in minor units to get points.

    A multiplier of 1.0 means one cent earns one point.
    """

    multiplier: float

    def __post_init__(self):
        if not math.isfinite(self.multiplier) or self.multiplier <= 0:
            raise ValidationException("Conversion rate multiplier must be a positive number")

    @classmethod
    def standard(cls) -> "ConversionRate":
        return cls(1.0)

    @classmethod
    def from_multiplier(cls, multiplier: float) -> "ConversionRate":
        return cls(float(multiplier))

    @classmethod
    def from_ratio(cls, cents: int, points: int) -> "ConversionRate":
        """Build a rate where ``cents`` minor units earn ``points`` points."""
        if cents <= 0 or points <= 0:
            raise ValidationException("Both cents and points must be positive")
        return cls(points / cents)

    def inverse(self) -> "ConversionRate":
        return ConversionRate(1.0 / self.multiplier)

    def is_equivalent(self, other: "ConversionRate") -> bool:
        return math.isclose(self.multiplier, other.multiplier, rel_tol=0.0, abs_tol=0.001)

    def __str__(self) -> str:
        return f"x{self.multiplier}"
