"""Application services (use cases)."""

from .audit_service import AuditService
from .locks import AccountLockRegistry
from .loyalty_service import LoyaltyService

__all__ = [
    "AuditService",
    "AccountLockRegistry",
    "LoyaltyService",
]
