"""Wiring of the loyalty service graph."""

from contextlib import AsyncExitStack, asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from loyalty_ledger.application.services import (
    AccountLockRegistry,
    AuditService,
    LoyaltyService,
)
from loyalty_ledger.domain.exceptions import FraudDetectedException
from loyalty_ledger.domain.interfaces import EventDispatcher, FraudAnalyzer
from loyalty_ledger.infrastructure.clients import HttpEventDispatcher
from loyalty_ledger.infrastructure.database import DatabaseSessionManager, db_manager
from loyalty_ledger.infrastructure.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyAuditRepository,
    SqlAlchemyTransactionRepository,
)
from loyalty_ledger.service.fraud import FraudDetectionService
from loyalty_ledger.service.rules import RulesEngine, create_default_rules_engine

# Shared by every service instance so locking holds across sessions
account_locks = AccountLockRegistry()


@lru_cache
def get_rules_engine() -> RulesEngine:
    """Get the process-wide rules engine; register earning rules on it at startup."""
    return create_default_rules_engine()


@lru_cache
def get_fraud_detection() -> FraudDetectionService:
    """Get a FraudDetectionService instance."""
    return FraudDetectionService()


@lru_cache
def get_event_dispatcher() -> HttpEventDispatcher:
    """Get an EventDispatcher instance."""
    return HttpEventDispatcher()


def build_loyalty_service(
    session: AsyncSession,
    rules_engine: Optional[RulesEngine] = None,
    fraud_detection: Optional[FraudAnalyzer] = None,
    event_dispatcher: Optional[EventDispatcher] = None,
    lock_registry: Optional[AccountLockRegistry] = None,
) -> LoyaltyService:
    """Get a LoyaltyService bound to a session, with shared collaborators by default."""
    return LoyaltyService(
        account_repository=SqlAlchemyAccountRepository(session),
        transaction_repository=SqlAlchemyTransactionRepository(session),
        rules_engine=rules_engine or get_rules_engine(),
        fraud_detection=fraud_detection or get_fraud_detection(),
        audit_service=AuditService(SqlAlchemyAuditRepository(session)),
        event_dispatcher=event_dispatcher or get_event_dispatcher(),
        lock_registry=lock_registry or account_locks,
    )


@asynccontextmanager
async def loyalty_service_scope(
    manager: DatabaseSessionManager = db_manager,
    **overrides,
) -> AsyncGenerator[LoyaltyService, None]:
    """
    Provide a LoyaltyService inside one transactional session.

    Commits when the block exits normally and rolls back on error. A
    blocked fraud attempt still commits so its audit record survives,
    together with anything written earlier in the same scope.

    Customer locks taken inside the block are held until the session has
    committed and closed, so a concurrent scope on the same account only
    sees committed state. A scope belongs to one task; touching several
    customers in overlapping scopes can deadlock.

    Keyword overrides are passed on to ``build_loyalty_service``.
    """
    async with AsyncExitStack() as locks:
        async with manager.session() as session:
            service = build_loyalty_service(session, **overrides)
            # Released by the outer stack, after commit and close
            await locks.enter_async_context(service.holding_locks())
            try:
                yield service
            except FraudDetectedException:
                await session.commit()
                raise
