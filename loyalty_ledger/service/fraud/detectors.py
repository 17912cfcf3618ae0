"""
Fraud detectors.

Each detector scores one signal. Activity counters are read from the
transaction context, where the caller puts what it knows about the
customer's recent history.
"""

from abc import ABC, abstractmethod

from loyalty_ledger.domain.entities import LoyaltyAccount
from loyalty_ledger.domain.value_objects import Money, TransactionContext

from .result import FraudResult


class FraudDetector(ABC):
    """Scores a single fraud signal."""

    @abstractmethod
    def analyze(
        self,
        account: LoyaltyAccount,
        amount: Money,
        context: TransactionContext,
    ) -> FraudResult:
        ...


class VelocityDetector(FraudDetector):
    """
    Flags bursts of activity.

    Context keys:
        recent_transaction_count: Transactions in the last day
        recent_total_amount: Total spent in the last day (dollars)
    """

    def __init__(
        self,
        max_daily_transactions: int = 50,
        max_daily_amount: float = 10_000.0,
    ):
        self.max_daily_transactions = max_daily_transactions
        self.max_daily_amount = max_daily_amount

    def analyze(
        self,
        account: LoyaltyAccount,
        amount: Money,
        context: TransactionContext,
    ) -> FraudResult:
        recent_count = context.get("recent_transaction_count", 0)
        recent_amount = context.get("recent_total_amount", 0.0)

        reasons = []
        score = 0.0

        if recent_count > self.max_daily_transactions:
            reasons.append("High transaction frequency")
            score += 0.4
        elif recent_count > self.max_daily_transactions * 0.7:
            reasons.append("Elevated transaction frequency")
            score += 0.2

        if recent_amount > self.max_daily_amount:
            reasons.append("High daily transaction volume")
            score += 0.5
        elif recent_amount > self.max_daily_amount * 0.7:
            reasons.append("Elevated daily transaction volume")
            score += 0.3

        return FraudResult(score, tuple(reasons))


class AmountDetector(FraudDetector):
    """
    Flags unusually large purchases.

    Context keys:
        account_average_amount: Typical purchase for the account (dollars),
            100.0 when unknown
    """

    DEFAULT_AVERAGE_AMOUNT = 100.0

    def __init__(
        self,
        suspicious_amount: float = 1_000.0,
        high_risk_amount: float = 5_000.0,
    ):
        self.suspicious_amount = suspicious_amount
        self.high_risk_amount = high_risk_amount

    def analyze(
        self,
        account: LoyaltyAccount,
        amount: Money,
        context: TransactionContext,
    ) -> FraudResult:
        transaction_amount = amount.to_dollars()

        reasons = []
        score = 0.0

        if transaction_amount >= self.high_risk_amount:
            reasons.append("Unusually high transaction amount")
            score = 0.7
        elif transaction_amount >= self.suspicious_amount:
            reasons.append("High transaction amount")
            score = 0.3

        average_amount = context.get("account_average_amount", self.DEFAULT_AVERAGE_AMOUNT)
        if transaction_amount > average_amount * 10:
            reasons.append("Amount significantly higher than account average")
            score += 0.4

        return FraudResult(score, tuple(reasons))
