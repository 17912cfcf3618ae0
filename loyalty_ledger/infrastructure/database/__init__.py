"""Database infrastructure."""

from .connection import (
    get_db_session,
    normalize_database_url,
    DatabaseSessionManager,
    db_manager,
)
from .models import (
    Base,
    LoyaltyAccountModel,
    PointsTransactionModel,
    AuditRecordModel,
    naive_utc,
)

__all__ = [
    "get_db_session",
    "normalize_database_url",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "LoyaltyAccountModel",
    "PointsTransactionModel",
    "AuditRecordModel",
    "naive_utc",
]
