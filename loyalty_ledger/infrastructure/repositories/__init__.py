"""Repository implementations."""

from .account_repository import SqlAlchemyAccountRepository
from .transaction_repository import SqlAlchemyTransactionRepository
from .audit_repository import SqlAlchemyAuditRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyAuditRepository",
]
