"""Data transfer objects returned by the loyalty use cases."""

from dataclasses import dataclass
from typing import List, Optional

from loyalty_ledger.domain.entities import LoyaltyAccount, PointsTransaction
from loyalty_ledger.domain.value_objects import Money


@dataclass(frozen=True)
class EarningResult:
    """Outcome of an earn operation. Balances are post-operation."""

    transaction: PointsTransaction
    points_earned: int
    available_points: int
    pending_points: int

    @classmethod
    def from_entity(
        cls,
        account: LoyaltyAccount,
        transaction: PointsTransaction,
    ) -> "EarningResult":
        return cls(
            transaction=transaction,
            points_earned=transaction.points.value,
            available_points=account.available_points.value,
            pending_points=account.pending_points.value,
        )

    def to_dict(self) -> dict:
        return {
            "transaction": self.transaction.to_dict(),
            "points_earned": self.points_earned,
            "new_available_balance": self.available_points,
            "new_pending_balance": self.pending_points,
        }


@dataclass(frozen=True)
class RedemptionResult:
    """Outcome of a redeem operation."""

    transaction: PointsTransaction
    points_redeemed: int
    available_points: int
    redemption_value: Optional[Money]

    @classmethod
    def from_entity(
        cls,
        account: LoyaltyAccount,
        transaction: PointsTransaction,
        redemption_value: Optional[Money],
    ) -> "RedemptionResult":
        return cls(
            transaction=transaction,
            points_redeemed=transaction.points.value,
            available_points=account.available_points.value,
            redemption_value=redemption_value,
        )

    def to_dict(self) -> dict:
        return {
            "transaction": self.transaction.to_dict(),
            "points_redeemed": self.points_redeemed,
            "new_available_balance": self.available_points,
            "redemption_value": (
                self.redemption_value.to_dict() if self.redemption_value else None
            ),
        }


@dataclass(frozen=True)
class AccountBalanceResponse:
    """Current balances of an account."""

    account_id: str
    customer_id: str
    status: str
    available_points: int
    pending_points: int
    lifetime_points: int
    last_activity_at: Optional[str]

    @classmethod
    def from_entity(cls, account: LoyaltyAccount) -> "AccountBalanceResponse":
        return cls(
            account_id=str(account.id),
            customer_id=account.customer_id,
            status=account.status.value,
            available_points=account.available_points.value,
            pending_points=account.pending_points.value,
            lifetime_points=account.lifetime_points.value,
            last_activity_at=(
                account.last_activity_at.isoformat() + "Z"
                if account.last_activity_at
                else None
            ),
        )


@dataclass(frozen=True)
class TransactionSummary:
    """Brief summary of a transaction for history listings."""

    transaction_id: str
    type: str
    points: int
    created_at: str
    processed: bool


@dataclass(frozen=True)
class TransactionHistoryResponse:
    """Response containing an account's recent transactions, newest first."""

    customer_id: str
    transactions: List[TransactionSummary]

    @classmethod
    def from_entities(
        cls,
        customer_id: str,
        transactions: List[PointsTransaction],
    ) -> "TransactionHistoryResponse":
        summaries = [
            TransactionSummary(
                transaction_id=str(t.id),
                type=t.type.value,
                points=t.points.value,
                created_at=t.created_at.isoformat() + "Z",
                processed=t.is_processed,
            )
            for t in transactions
        ]
        return cls(customer_id=customer_id, transactions=summaries)
