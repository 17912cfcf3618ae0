"""Points transaction entity representing a single ledger movement."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from loyalty_ledger.domain.value_objects import Points, TransactionContext


class TransactionType(str, Enum):
    """Kind of ledger movement."""

    EARN = "earn"
    REDEEM = "redeem"
    EXPIRE = "expire"
    REFUND = "refund"
    ADJUSTMENT = "adjustment"

    @property
    def is_earning(self) -> bool:
        return self in (TransactionType.EARN, TransactionType.REFUND)

    @property
    def is_spending(self) -> bool:
        return self in (
            TransactionType.REDEEM,
            TransactionType.EXPIRE,
            TransactionType.ADJUSTMENT,
        )

    @property
    def description(self) -> str:
        return {
            TransactionType.EARN: "Points Earned",
            TransactionType.REDEEM: "Points Redeemed",
            TransactionType.EXPIRE: "Points Expired",
            TransactionType.REFUND: "Points Refunded",
            TransactionType.ADJUSTMENT: "Points Adjustment",
        }[self]


@dataclass(frozen=True)
class PointsTransaction:
    """
    Immutable record of one ledger movement.

    Attributes:
        account_id: Account the movement belongs to
        type: Kind of movement
        points: Magnitude of the movement (never negative)
        context: The context the operation ran with
        id: Unique transaction identifier
        created_at: When the movement was recorded
        processed_at: When downstream processing completed, if it has
    """

    account_id: UUID
    type: TransactionType
    points: Points
    context: TransactionContext
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    processed_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        account_id: UUID,
        type: TransactionType,
        points: Points,
        context: TransactionContext,
    ) -> "PointsTransaction":
        return cls(account_id=account_id, type=type, points=points, context=context)

    @property
    def is_processed(self) -> bool:
        return self.processed_at is not None

    @property
    def is_earning(self) -> bool:
        return self.type.is_earning

    @property
    def is_spending(self) -> bool:
        return self.type.is_spending

    def mark_as_processed(self) -> "PointsTransaction":
        """Return a processed copy; already-processed records come back unchanged."""
        if self.is_processed:
            return self
        return replace(self, processed_at=datetime.utcnow())

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "account_id": str(self.account_id),
            "type": self.type.value,
            "points": self.points.value,
            "context": self.context.to_dict(),
            "created_at": self.created_at.isoformat() + "Z",
            "processed_at": (
                self.processed_at.isoformat() + "Z" if self.processed_at else None
            ),
        }
