"""LoyaltyAccount aggregate root."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from loyalty_ledger.domain.events import (
    AccountCreated,
    DomainEvent,
    PointsEarned,
    PointsRedeemed,
)
from loyalty_ledger.domain.exceptions import (
    InactiveAccountException,
    InsufficientPendingPointsException,
    InsufficientPointsException,
    ValidationException,
)
from loyalty_ledger.domain.value_objects import Points, TransactionContext

from .transaction import PointsTransaction, TransactionType


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    CLOSED = "closed"

    @property
    def is_active(self) -> bool:
        return self == AccountStatus.ACTIVE

    @property
    def can_earn_points(self) -> bool:
        return self == AccountStatus.ACTIVE

    @property
    def can_redeem_points(self) -> bool:
        return self == AccountStatus.ACTIVE


@dataclass
class LoyaltyAccount:
    """
    A customer's loyalty account and the invariants around its balances.

    Earned points land in ``pending_points`` and only become spendable
    once confirmed. Every balance stays non-negative and only active
    accounts may earn, redeem, adjust or expire points.

    Mutating operations buffer domain events. The caller drains them with
    ``get_events()``, dispatches them and then calls ``clear_events()``.
    The aggregate does no locking; callers must serialize mutations per
    account.
    """

    customer_id: str
    id: UUID = field(default_factory=uuid4)
    available_points: Points = field(default_factory=Points.zero)
    pending_points: Points = field(default_factory=Points.zero)
    lifetime_points: Points = field(default_factory=Points.zero)
    status: AccountStatus = AccountStatus.ACTIVE
    created_at: datetime = field(default_factory=datetime.utcnow)
    last_activity_at: Optional[datetime] = None
    _events: list[DomainEvent] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        if not isinstance(self.customer_id, str) or not self.customer_id.strip():
            raise ValidationException("Customer ID cannot be empty")
        self.customer_id = self.customer_id.strip()

    @classmethod
    def create(cls, customer_id: str) -> "LoyaltyAccount":
        """Open a new active account with zero balances."""
        account = cls(customer_id=customer_id)
        account._record_event(AccountCreated(account.id, account.customer_id))
        return account

    # -------------------------------------------------------------------------
    # Points operations
    # -------------------------------------------------------------------------

    def earn_points(self, points: Points, context: TransactionContext) -> PointsTransaction:
        """Add earned points to the pending balance."""
        self._guard_against_inactive_account()

        transaction = PointsTransaction.create(
            self.id, TransactionType.EARN, points, context
        )

        self.pending_points = self.pending_points.add(points)
        self.last_activity_at = datetime.utcnow()

        self._record_event(
            PointsEarned(
                account_id=self.id,
                transaction=transaction,
                available_points=self.available_points,
                pending_points=self.pending_points,
            )
        )

        return transaction

    def confirm_pending_points(self, points: Optional[Points] = None) -> Points:
        """
        Move pending points into the available balance.

        Args:
            points: How many to confirm; defaults to everything pending

        Returns:
            The points that were confirmed

        Raises:
            InsufficientPendingPointsException: If more than pending is requested
        """
        to_confirm = points if points is not None else self.pending_points

        if to_confirm.is_greater_than(self.pending_points):
            raise InsufficientPendingPointsException(
                requested=to_confirm.value,
                pending=self.pending_points.value,
            )

        self.available_points = self.available_points.add(to_confirm)
        self.lifetime_points = self.lifetime_points.add(to_confirm)
        self.pending_points = self.pending_points.subtract(to_confirm)

        return to_confirm

    def redeem_points(
        self,
        points: Points,
        context: Optional[TransactionContext] = None,
    ) -> PointsTransaction:
        """Spend available points."""
        self._guard_against_inactive_account()
        self._guard_against_insufficient_points(points)

        context = context if context is not None else TransactionContext.redemption()

        transaction = PointsTransaction.create(
            self.id, TransactionType.REDEEM, points, context
        )

        self.available_points = self.available_points.subtract(points)
        self.last_activity_at = datetime.utcnow()

        self._record_event(
            PointsRedeemed(
                account_id=self.id,
                transaction=transaction,
                remaining_points=self.available_points,
            )
        )

        return transaction

    def adjust_points(self, delta: int, reason: str) -> PointsTransaction:
        """
        Apply a signed manual correction.

        A positive delta credits available and lifetime points. A zero or
        negative delta debits available points, floored at zero; the amount
        actually removed is recorded as ``applied_points`` in the context.
        """
        self._guard_against_inactive_account()

        magnitude = Points(abs(delta))

        if delta > 0:
            direction = "credit"
            applied = magnitude
            self.available_points = self.available_points.add(magnitude)
            self.lifetime_points = self.lifetime_points.add(magnitude)
        else:
            direction = "debit"
            applied = min(magnitude, self.available_points)
            self.available_points = self.available_points.subtract(applied)

        context = TransactionContext.create(
            {
                "reason": reason,
                "type": "adjustment",
                "direction": direction,
                "applied_points": applied.value,
            }
        )

        transaction = PointsTransaction.create(
            self.id, TransactionType.ADJUSTMENT, magnitude, context
        )
        self.last_activity_at = datetime.utcnow()

        return transaction

    def expire_points(self, points: Points) -> PointsTransaction:
        """Expire available points, capped at the available balance."""
        self._guard_against_inactive_account()

        expired = min(points, self.available_points)

        context = TransactionContext.create(
            {
                "type": "expiration",
                "requested_points": points.value,
                "expired_points": expired.value,
            }
        )

        transaction = PointsTransaction.create(
            self.id, TransactionType.EXPIRE, expired, context
        )

        self.available_points = self.available_points.subtract(expired)
        self.last_activity_at = datetime.utcnow()

        return transaction

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def suspend(self) -> None:
        self.status = AccountStatus.SUSPENDED

    def activate(self) -> None:
        self.status = AccountStatus.ACTIVE

    def close(self) -> None:
        """Close the account. Available and pending points are forfeited."""
        self.status = AccountStatus.CLOSED
        self.available_points = Points.zero()
        self.pending_points = Points.zero()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @property
    def can_earn_points(self) -> bool:
        return self.status.can_earn_points

    @property
    def can_redeem_points(self) -> bool:
        return self.status.can_redeem_points and not self.available_points.is_zero()

    def get_events(self) -> list[DomainEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "customer_id": self.customer_id,
            "available_points": self.available_points.value,
            "pending_points": self.pending_points.value,
            "lifetime_points": self.lifetime_points.value,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() + "Z",
            "last_activity_at": (
                self.last_activity_at.isoformat() + "Z" if self.last_activity_at else None
            ),
        }

    def _record_event(self, event: DomainEvent) -> None:
        self._events.append(event)

    def _guard_against_inactive_account(self) -> None:
        if not self.can_earn_points:
            raise InactiveAccountException(self.status.value)

    def _guard_against_insufficient_points(self, required: Points) -> None:
        if not self.available_points.is_greater_than_or_equal(required):
            raise InsufficientPointsException(
                required=required.value,
                available=self.available_points.value,
            )
