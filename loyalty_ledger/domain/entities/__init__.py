"""Domain Entities - Core business objects."""

from .transaction import PointsTransaction, TransactionType
from .audit import AuditRecord
from .account import AccountStatus, LoyaltyAccount

__all__ = [
    "PointsTransaction",
    "TransactionType",
    "AuditRecord",
    "AccountStatus",
    "LoyaltyAccount",
]
