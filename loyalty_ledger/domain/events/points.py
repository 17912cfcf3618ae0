"""Domain events recorded by the loyalty account aggregate."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar
from uuid import UUID

from loyalty_ledger.domain.value_objects import Points

if TYPE_CHECKING:
    from loyalty_ledger.domain.entities.transaction import PointsTransaction


@dataclass(frozen=True)
class DomainEvent:
    """Base class for notifications emitted by aggregates."""

    event_type: ClassVar[str] = "domain_event"

    def payload(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict:
        """Convert to dictionary for delivery."""
        return {
            "event": self.event_type,
            "occurred_at": self.occurred_at.isoformat() + "Z",
            **self.payload(),
        }


@dataclass(frozen=True)
class AccountCreated(DomainEvent):
    event_type: ClassVar[str] = "account_created"

    account_id: UUID
    customer_id: str
    occurred_at: datetime = field(default_factory=datetime.utcnow)

    def payload(self) -> dict[str, Any]:
        return {
            "account_id": str(self.account_id),
            "customer_id": self.customer_id,
        }


@dataclass(frozen=True)
class PointsEarned(DomainEvent):
    """Points landed in the pending balance; balances are post-operation."""

    event_type: ClassVar[str] = "points_earned"

    account_id: UUID
    transaction: "PointsTransaction"
    available_points: Points
    pending_points: Points
    occurred_at: datetime = field(default_factory=datetime.utcnow)

    def payload(self) -> dict[str, Any]:
        return {
            "account_id": str(self.account_id),
            "transaction": self.transaction.to_dict(),
            "available_points": self.available_points.value,
            "pending_points": self.pending_points.value,
        }


@dataclass(frozen=True)
class PointsRedeemed(DomainEvent):
    event_type: ClassVar[str] = "points_redeemed"

    account_id: UUID
    transaction: "PointsTransaction"
    remaining_points: Points
    occurred_at: datetime = field(default_factory=datetime.utcnow)

    def payload(self) -> dict[str, Any]:
        return {
            "account_id": str(self.account_id),
            "transaction": self.transaction.to_dict(),
            "remaining_points": self.remaining_points.value,
        }
