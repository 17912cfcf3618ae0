"""External collaborator interfaces."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from loyalty_ledger.domain.entities import LoyaltyAccount
from loyalty_ledger.domain.events import DomainEvent
from loyalty_ledger.domain.value_objects import Money, TransactionContext

if TYPE_CHECKING:
    from loyalty_ledger.service.fraud.result import FraudResult


class EventDispatcher(ABC):
    """
    Sink for domain events drained from aggregates.

    Events arrive in emission order after the aggregate has been saved.
    """

    @abstractmethod
    async def dispatch(self, event: DomainEvent) -> bool:
        """
        Deliver a single event.

        Returns:
            True if the event was delivered successfully

        Note:
            Delivery is best-effort; implementations report failure
            instead of raising.
        """
        ...


class FraudAnalyzer(ABC):
    """Scores an earn operation for fraud risk."""

    @abstractmethod
    def analyze(
        self,
        account: LoyaltyAccount,
        amount: Money,
        context: TransactionContext,
    ) -> "FraudResult":
        """
        Analyze a transaction.

        Returns:
            FraudResult with a score in [0, 1] and the reasons behind it
        """
        ...
