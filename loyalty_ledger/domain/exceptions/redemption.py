"""Redemption and fraud related domain exceptions."""

from typing import Any

from .base import DomainException


class RedemptionNotAllowedException(DomainException):
    """Raised when no redemption rule accepts the requested points."""

    def __init__(self, points: int):
        super().__init__(
            message=f"Redemption of {points} points not allowed by current rules",
            code="REDEMPTION_NOT_ALLOWED",
            context={"points": points},
        )
        self.points = points


class FraudDetectedException(DomainException):
    """Raised when fraud screening blocks a transaction."""

    def __init__(self, fraud_result: dict[str, Any]):
        super().__init__(
            message="Transaction blocked due to fraud detection",
            code="FRAUD_DETECTED",
            context=fraud_result,
        )
