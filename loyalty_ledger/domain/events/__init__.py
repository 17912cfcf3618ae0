"""Domain Events - Notifications buffered by aggregates."""

from .points import AccountCreated, DomainEvent, PointsEarned, PointsRedeemed

__all__ = [
    "DomainEvent",
    "AccountCreated",
    "PointsEarned",
    "PointsRedeemed",
]
