"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from loyalty_ledger.domain.entities import (
    AuditRecord,
    LoyaltyAccount,
    PointsTransaction,
    TransactionType,
)


class AccountRepository(ABC):
    """
    Abstract repository for LoyaltyAccount persistence.

    Implementations must reconstruct accounts with exactly the identity,
    balances, status and timestamps they were saved with.
    """

    @abstractmethod
    async def find_by_id(self, account_id: UUID) -> LoyaltyAccount:
        """
        Retrieve an account by its identifier.

        Raises:
            AccountNotFoundException: If no such account exists
        """
        ...

    @abstractmethod
    async def find_by_customer_id(self, customer_id: str) -> LoyaltyAccount:
        """
        Retrieve the account owned by a customer.

        Raises:
            AccountNotFoundException: If the customer has no account
        """
        ...

    @abstractmethod
    async def find_by_customer_ids(self, customer_ids: List[str]) -> List[LoyaltyAccount]:
        """Retrieve the accounts of several customers, oldest first."""
        ...

    @abstractmethod
    async def save(self, account: LoyaltyAccount) -> LoyaltyAccount:
        """Insert a new account or update an existing one."""
        ...

    @abstractmethod
    async def delete(self, account_id: UUID) -> None:
        ...

    @abstractmethod
    async def find_inactive(self, since: datetime) -> List[LoyaltyAccount]:
        """Accounts with no activity since the given moment."""
        ...

    @abstractmethod
    async def find_with_pending_points(self) -> List[LoyaltyAccount]:
        ...

    @abstractmethod
    async def exists(self, customer_id: str) -> bool:
        ...

    @abstractmethod
    async def count_total(self) -> int:
        ...

    @abstractmethod
    async def count_active(self) -> int:
        ...


class TransactionRepository(ABC):
    """Abstract repository for PointsTransaction persistence."""

    @abstractmethod
    async def save(self, transaction: PointsTransaction) -> PointsTransaction:
        ...

    @abstractmethod
    async def save_many(self, transactions: List[PointsTransaction]) -> None:
        ...

    @abstractmethod
    async def find_by_id(self, transaction_id: UUID) -> Optional[PointsTransaction]:
        """
        Retrieve a transaction by ID.

        Returns:
            The transaction if found, None otherwise
        """
        ...

    @abstractmethod
    async def find_by_account_id(
        self,
        account_id: UUID,
        limit: int = 100,
    ) -> List[PointsTransaction]:
        """Transactions of an account, newest first."""
        ...

    @abstractmethod
    async def find_by_type(
        self,
        transaction_type: TransactionType,
        limit: int = 100,
    ) -> List[PointsTransaction]:
        ...

    @abstractmethod
    async def find_by_date_range(
        self,
        start: datetime,
        end: datetime,
        limit: int = 1000,
    ) -> List[PointsTransaction]:
        ...

    @abstractmethod
    async def find_unprocessed(self, limit: int = 100) -> List[PointsTransaction]:
        """Transactions not yet marked as processed, oldest first."""
        ...

    @abstractmethod
    async def total_points_earned(self) -> int:
        ...

    @abstractmethod
    async def total_points_redeemed(self) -> int:
        ...


class AuditRepository(ABC):
    """
    Abstract repository for the audit trail.

    Audit records are append-only; the only removal is retention cleanup.
    """

    @abstractmethod
    async def store(self, record: AuditRecord) -> AuditRecord:
        ...

    @abstractmethod
    async def store_many(self, records: List[AuditRecord]) -> None:
        ...

    @abstractmethod
    async def find_by_entity(
        self,
        entity_id: str,
        limit: int = 100,
    ) -> List[AuditRecord]:
        """Records about one entity, newest first."""
        ...

    @abstractmethod
    async def find_by_action(self, action: str, limit: int = 100) -> List[AuditRecord]:
        ...

    @abstractmethod
    async def find_by_date_range(
        self,
        start: datetime,
        end: datetime,
        limit: int = 1000,
    ) -> List[AuditRecord]:
        ...

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        """
        Remove records created before the cutoff.

        Returns:
            Number of records deleted
        """
        ...
