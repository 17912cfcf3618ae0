"""
Domain Interfaces (Ports)
"""

from .repositories import AccountRepository, AuditRepository, TransactionRepository
from .clients import EventDispatcher, FraudAnalyzer

__all__ = [
    "AccountRepository",
    "AuditRepository",
    "TransactionRepository",
    "EventDispatcher",
    "FraudAnalyzer",
]
