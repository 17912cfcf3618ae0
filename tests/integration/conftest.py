"""
Fixtures for integration tests.

Provides:
- In-memory database and session
- SQLAlchemy repositories bound to the session
- Mock event dispatcher that records delivered events
- Mock fraud analyzer returning a preset result
- LoyaltyService wired with the above
"""

from typing import AsyncGenerator, List, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from loyalty_ledger.application.services import (
    AccountLockRegistry,
    AuditService,
    LoyaltyService,
)
from loyalty_ledger.domain.entities import LoyaltyAccount
from loyalty_ledger.domain.events import DomainEvent
from loyalty_ledger.domain.interfaces import EventDispatcher, FraudAnalyzer
from loyalty_ledger.domain.value_objects import Currency, Money, TransactionContext
from loyalty_ledger.infrastructure.database import Base
from loyalty_ledger.infrastructure.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyAuditRepository,
    SqlAlchemyTransactionRepository,
)
from loyalty_ledger.service.fraud import FraudDetectionService, FraudResult
from loyalty_ledger.service.rules import (
    BasicRedemptionRule,
    CategoryMultiplierRule,
    RulesEngine,
)


# =============================================================================
# Mock Clients
# =============================================================================

class MockEventDispatcher(EventDispatcher):
    """Mock dispatcher that records every event it is handed."""

    def __init__(self, fail_mode: bool = False):
        self.fail_mode = fail_mode
        self.call_count = 0
        self.events: List[DomainEvent] = []

    async def dispatch(self, event: DomainEvent) -> bool:
        self.call_count += 1

        if self.fail_mode:
            return False

        self.events.append(event)
        return True

    @property
    def event_types(self) -> List[str]:
        return [event.event_type for event in self.events]


class MockFraudAnalyzer(FraudAnalyzer):
    """Mock analyzer that returns the same result for every screening."""

    def __init__(self, result: Optional[FraudResult] = None):
        self.result = result or FraudResult.clean()
        self.call_count = 0

    def analyze(
        self,
        account: LoyaltyAccount,
        amount: Money,
        context: TransactionContext,
    ) -> FraudResult:
        self.call_count += 1
        return self.result


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


# =============================================================================
# Repository Fixtures
# =============================================================================

@pytest.fixture
def account_repository(test_session: AsyncSession) -> SqlAlchemyAccountRepository:
    return SqlAlchemyAccountRepository(test_session)


@pytest.fixture
def transaction_repository(test_session: AsyncSession) -> SqlAlchemyTransactionRepository:
    return SqlAlchemyTransactionRepository(test_session)


@pytest.fixture
def audit_repository(test_session: AsyncSession) -> SqlAlchemyAuditRepository:
    return SqlAlchemyAuditRepository(test_session)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def rules_engine() -> RulesEngine:
    """Engine doubling electronics purchases, redeeming 100 points per dollar."""
    engine = RulesEngine()
    engine.add_earning_rule(CategoryMultiplierRule("electronics", 2.0))
    engine.add_redemption_rule(BasicRedemptionRule(Currency.USD))
    return engine


@pytest.fixture
def mock_event_dispatcher() -> MockEventDispatcher:
    return MockEventDispatcher()


@pytest.fixture
def failing_event_dispatcher() -> MockEventDispatcher:
    return MockEventDispatcher(fail_mode=True)


@pytest.fixture
def mock_fraud_analyzer() -> MockFraudAnalyzer:
    return MockFraudAnalyzer()


@pytest.fixture
def audit_service(audit_repository: SqlAlchemyAuditRepository) -> AuditService:
    return AuditService(audit_repository)


@pytest.fixture
def loyalty_service(
    account_repository: SqlAlchemyAccountRepository,
    transaction_repository: SqlAlchemyTransactionRepository,
    rules_engine: RulesEngine,
    audit_service: AuditService,
    mock_event_dispatcher: MockEventDispatcher,
) -> LoyaltyService:
    """
    Create a LoyaltyService backed by the in-memory database.

    Uses the real fraud detection with default thresholds, so purchases
    of a few dollars pass and purchases in the thousands are flagged.
    """
    return LoyaltyService(
        account_repository=account_repository,
        transaction_repository=transaction_repository,
        rules_engine=rules_engine,
        fraud_detection=FraudDetectionService(),
        audit_service=audit_service,
        event_dispatcher=mock_event_dispatcher,
        lock_registry=AccountLockRegistry(),
    )


@pytest.fixture
def electronics_purchase() -> TransactionContext:
    return TransactionContext.earning(category="electronics", source="pos")
