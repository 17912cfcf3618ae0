"""Data Transfer Objects for application layer."""

from .results import (
    AccountBalanceResponse,
    EarningResult,
    RedemptionResult,
    TransactionHistoryResponse,
    TransactionSummary,
)

__all__ = [
    "EarningResult",
    "RedemptionResult",
    "AccountBalanceResponse",
    "TransactionHistoryResponse",
    "TransactionSummary",
]
