"""
Integration tests for database session management and service wiring.

These tests verify:
1. Database URLs are routed to the async drivers
2. DatabaseSessionManager commits on success and rolls back on error
3. loyalty_service_scope keeps the audit of a blocked fraud attempt
4. loyalty_service_scope holds customer locks until its session commits
"""

import asyncio

import pytest
import pytest_asyncio

from loyalty_ledger.application.services import AccountLockRegistry

from loyalty_ledger.core.dependencies import loyalty_service_scope
from loyalty_ledger.domain.entities import LoyaltyAccount
from loyalty_ledger.domain.exceptions import FraudDetectedException
from loyalty_ledger.domain.value_objects import Currency, Money, TransactionContext
from loyalty_ledger.infrastructure.database import (
    DatabaseSessionManager,
    normalize_database_url,
)
from loyalty_ledger.infrastructure.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyAuditRepository,
)
from loyalty_ledger.service.fraud import FraudResult


@pytest_asyncio.fixture
async def manager():
    """Session manager over a fresh in-memory database."""
    manager = DatabaseSessionManager()
    manager.init("sqlite:///:memory:")
    await manager.create_all()

    yield manager

    await manager.close()


# =============================================================================
# URL Normalization Tests
# =============================================================================

class TestNormalizeDatabaseUrl:
    """Tests for normalize_database_url."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("postgres://u:p@db/loyalty", "postgresql+asyncpg://u:p@db/loyalty"),
            ("postgresql://u:p@db/loyalty", "postgresql+asyncpg://u:p@db/loyalty"),
            ("sqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
            ("postgresql+asyncpg://u:p@db/loyalty", "postgresql+asyncpg://u:p@db/loyalty"),
        ],
    )
    def test_selects_async_driver(self, url, expected):
        assert normalize_database_url(url) == expected


# =============================================================================
# Session Manager Tests
# =============================================================================

class TestDatabaseSessionManager:
    """Tests for DatabaseSessionManager."""

    def test_engine_requires_init(self):
        with pytest.raises(RuntimeError):
            DatabaseSessionManager().engine

    @pytest.mark.asyncio
    async def test_session_commits_on_success(self, manager):
        async with manager.session() as session:
            await SqlAlchemyAccountRepository(session).save(LoyaltyAccount.create("customer-1"))

        async with manager.session() as session:
            assert await SqlAlchemyAccountRepository(session).exists("customer-1")

    @pytest.mark.asyncio
    async def test_session_rolls_back_on_error(self, manager):
        with pytest.raises(RuntimeError):
            async with manager.session() as session:
                await SqlAlchemyAccountRepository(session).save(
                    LoyaltyAccount.create("customer-1")
                )
                raise RuntimeError("boom")

        async with manager.session() as session:
            assert not await SqlAlchemyAccountRepository(session).exists("customer-1")

    @pytest.mark.asyncio
    async def test_close_resets_engine(self, manager):
        await manager.close()

        with pytest.raises(RuntimeError):
            manager.engine


# =============================================================================
# Service Scope Tests
# =============================================================================

class TestLoyaltyServiceScope:
    """Tests for loyalty_service_scope."""

    @pytest.mark.asyncio
    async def test_scope_commits_operations(self, manager, mock_event_dispatcher):
        async with loyalty_service_scope(
            manager, event_dispatcher=mock_event_dispatcher
        ) as service:
            await service.create_account("customer-1")

        async with loyalty_service_scope(
            manager, event_dispatcher=mock_event_dispatcher
        ) as service:
            balance = await service.get_account_balance("customer-1")

        assert balance.customer_id == "customer-1"
        assert mock_event_dispatcher.event_types == ["account_created"]

    @pytest.mark.asyncio
    async def test_blocked_fraud_attempt_audit_survives(
        self, manager, mock_event_dispatcher, mock_fraud_analyzer, rules_engine
    ):
        async with loyalty_service_scope(
            manager, event_dispatcher=mock_event_dispatcher
        ) as service:
            account = await service.create_account("customer-1")

        mock_fraud_analyzer.result = FraudResult(0.95, ("Blocked customer",))

        with pytest.raises(FraudDetectedException):
            async with loyalty_service_scope(
                manager,
                rules_engine=rules_engine,
                fraud_detection=mock_fraud_analyzer,
                event_dispatcher=mock_event_dispatcher,
            ) as service:
                await service.earn_points(
                    "customer-1",
                    Money.from_dollars(25.00, Currency.USD),
                    TransactionContext.earning(category="electronics"),
                )

        async with manager.session() as session:
            records = await SqlAlchemyAuditRepository(session).find_by_action("fraud_detected")
            stored = await SqlAlchemyAccountRepository(session).find_by_customer_id("customer-1")

        assert len(records) == 1
        assert records[0].entity_id == str(account.id)
        assert records[0].payload["fraud_reasons"] == ["Blocked customer"]
        assert stored.pending_points.is_zero()

    @pytest.mark.asyncio
    async def test_other_errors_roll_back(self, manager, mock_event_dispatcher):
        with pytest.raises(RuntimeError):
            async with loyalty_service_scope(
                manager, event_dispatcher=mock_event_dispatcher
            ) as service:
                await service.create_account("customer-1")
                raise RuntimeError("boom")

        async with manager.session() as session:
            assert not await SqlAlchemyAccountRepository(session).exists("customer-1")


# =============================================================================
# Service Scope Locking Tests
# =============================================================================

class TestLoyaltyServiceScopeLocking:
    """Tests for per-customer locking across loyalty_service_scope."""

    @pytest.mark.asyncio
    async def test_lock_held_until_scope_exits(
        self, manager, mock_event_dispatcher, mock_fraud_analyzer, rules_engine
    ):
        locks = AccountLockRegistry()

        async with loyalty_service_scope(
            manager,
            rules_engine=rules_engine,
            fraud_detection=mock_fraud_analyzer,
            event_dispatcher=mock_event_dispatcher,
            lock_registry=locks,
        ) as service:
            await service.create_account("customer-1")

            assert locks.is_locked("customer-1")

            # A second operation on the held customer does not lock again
            earned = await service.earn_points(
                "customer-1",
                Money.from_dollars(10.00, Currency.USD),
                TransactionContext.earning(category="electronics"),
            )

            assert earned.pending_points == 2000
            assert locks.is_locked("customer-1")

        assert not locks.is_locked("customer-1")
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_lock_released_when_scope_fails(self, manager, mock_event_dispatcher):
        locks = AccountLockRegistry()

        with pytest.raises(RuntimeError):
            async with loyalty_service_scope(
                manager, event_dispatcher=mock_event_dispatcher, lock_registry=locks
            ) as service:
                await service.create_account("customer-1")
                raise RuntimeError("boom")

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_concurrent_scopes_wait_for_commit(
        self, manager, mock_event_dispatcher, mock_fraud_analyzer, rules_engine
    ):
        locks = AccountLockRegistry()
        purchase = TransactionContext.earning(category="electronics")

        def scope():
            return loyalty_service_scope(
                manager,
                rules_engine=rules_engine,
                fraud_detection=mock_fraud_analyzer,
                event_dispatcher=mock_event_dispatcher,
                lock_registry=locks,
            )

        async with scope() as service:
            await service.create_account("customer-1")

        timeline = []
        first_earned = asyncio.Event()
        release_first = asyncio.Event()

        async def first():
            async with scope() as service:
                await service.earn_points(
                    "customer-1", Money.from_dollars(10.00, Currency.USD), purchase
                )
                first_earned.set()
                await release_first.wait()
                timeline.append("first_finishing")

        async def second():
            await first_earned.wait()
            async with scope() as service:
                timeline.append("second_started")
                earned = await service.earn_points(
                    "customer-1", Money.from_dollars(10.00, Currency.USD), purchase
                )
                timeline.append("second_earned")
            return earned

        first_task = asyncio.create_task(first())
        second_task = asyncio.create_task(second())

        await first_earned.wait()
        await asyncio.sleep(0.05)

        # First scope has saved but not committed; second is parked on the lock
        assert timeline == ["second_started"]
        assert locks.is_locked("customer-1")

        release_first.set()
        _, earned = await asyncio.gather(first_task, second_task)

        assert timeline == ["second_started", "first_finishing", "second_earned"]
        assert earned.pending_points == 4000

        async with manager.session() as session:
            stored = await SqlAlchemyAccountRepository(session).find_by_customer_id("customer-1")

        assert stored.pending_points.value == 4000
