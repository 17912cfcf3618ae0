"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException, ValidationException
from .account import (
    AccountAlreadyExistsException,
    AccountNotFoundException,
    InactiveAccountException,
    InsufficientPendingPointsException,
    InsufficientPointsException,
)
from .redemption import FraudDetectedException, RedemptionNotAllowedException

__all__ = [
    "DomainException",
    "ValidationException",
    "AccountAlreadyExistsException",
    "AccountNotFoundException",
    "InactiveAccountException",
    "InsufficientPendingPointsException",
    "InsufficientPointsException",
    "FraudDetectedException",
    "RedemptionNotAllowedException",
]
