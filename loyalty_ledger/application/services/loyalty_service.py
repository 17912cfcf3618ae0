"""Loyalty service - orchestrates the points ledger use cases."""

from contextlib import AsyncExitStack, asynccontextmanager, nullcontext
from typing import AsyncGenerator, Optional, Set

import structlog

from loyalty_ledger.application.dto import (
    AccountBalanceResponse,
    EarningResult,
    RedemptionResult,
    TransactionHistoryResponse,
)
from loyalty_ledger.core.metrics import (
    record_account_operation,
    record_fraud_check,
    record_points_earned,
    record_points_redeemed,
    track_rule_evaluation_latency,
)
from loyalty_ledger.domain.entities import LoyaltyAccount, PointsTransaction
from loyalty_ledger.domain.exceptions import (
    AccountAlreadyExistsException,
    AccountNotFoundException,
    FraudDetectedException,
    RedemptionNotAllowedException,
)
from loyalty_ledger.domain.interfaces import (
    AccountRepository,
    EventDispatcher,
    FraudAnalyzer,
    TransactionRepository,
)
from loyalty_ledger.domain.value_objects import Money, Points, TransactionContext
from loyalty_ledger.service.rules import RulesEngine

from .audit_service import AuditService
from .locks import AccountLockRegistry

logger = structlog.get_logger(__name__)


class LoyaltyService:
    """
    Application service for loyalty ledger use cases.

    Every mutation of an account runs under that customer's lock, so at
    most one mutation per account is in flight within this process. Inside
    ``holding_locks`` the lock stays taken until the caller's unit of work
    ends, which is how ``loyalty_service_scope`` covers the commit too.
    Domain events are dispatched in emission order after the account has
    been saved.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        transaction_repository: TransactionRepository,
        rules_engine: RulesEngine,
        fraud_detection: FraudAnalyzer,
        audit_service: AuditService,
        event_dispatcher: EventDispatcher,
        lock_registry: Optional[AccountLockRegistry] = None,
    ):
        self._account_repo = account_repository
        self._transaction_repo = transaction_repository
        self._rules_engine = rules_engine
        self._fraud_detection = fraud_detection
        self._audit = audit_service
        self._event_dispatcher = event_dispatcher
        self._locks = lock_registry or AccountLockRegistry()
        self._held_locks: Optional[AsyncExitStack] = None
        self._held_customers: Set[str] = set()

    async def create_account(self, customer_id: str) -> LoyaltyAccount:
        """
        Open a loyalty account for a customer.

        Raises:
            AccountAlreadyExistsException: If the customer already has one
        """
        async with self._operation("create_account", customer_id) as log:
            if await self._account_repo.exists(customer_id):
                raise AccountAlreadyExistsException(customer_id)

            account = LoyaltyAccount.create(customer_id)
            await self._account_repo.save(account)

            await self._audit.log_account_created(account)
            await self._dispatch_events(account)

            log.info("account_created", account_id=str(account.id))

            return account

    async def earn_points(
        self,
        customer_id: str,
        amount: Money,
        context: TransactionContext,
    ) -> EarningResult:
        """
        Award points for a purchase.

        Points land in the pending balance until confirmed.

        Raises:
            AccountNotFoundException: If the customer has no account
            FraudDetectedException: If fraud screening blocks the purchase
            InactiveAccountException: If the account is not active
        """
        async with self._operation("earn_points", customer_id) as log:
            log = log.bind(amount=amount.to_dollars(), currency=amount.currency.code)
            log.info("points_earning_requested")

            account = await self._get_account(customer_id)

            fraud_result = self._fraud_detection.analyze(account, amount, context)
            record_fraud_check(
                fraud_result.score,
                fraud_result.is_suspicious,
                fraud_result.should_block,
            )

            if fraud_result.should_block:
                await self._audit.log_fraud_attempt(account, amount, context, fraud_result)
                log.warning(
                    "transaction_blocked",
                    fraud_score=fraud_result.score,
                    reasons=list(fraud_result.reasons),
                )
                raise FraudDetectedException(fraud_result.to_dict())

            if fraud_result.is_suspicious:
                log.warning(
                    "suspicious_transaction_allowed",
                    fraud_score=fraud_result.score,
                    reasons=list(fraud_result.reasons),
                )

            with track_rule_evaluation_latency():
                points = self._rules_engine.calculate_earning(amount, context)

            transaction = account.earn_points(points, context)

            await self._account_repo.save(account)
            await self._transaction_repo.save(transaction)

            await self._audit.log_points_earned(account, transaction, amount)
            await self._dispatch_events(account)

            record_points_earned(points.value, amount.currency.code)
            log.info(
                "points_earned",
                points_earned=points.value,
                transaction_id=str(transaction.id),
            )

            return EarningResult.from_entity(account, transaction)

    async def redeem_points(
        self,
        customer_id: str,
        points: Points,
        context: Optional[TransactionContext] = None,
    ) -> RedemptionResult:
        """
        Spend available points.

        Raises:
            AccountNotFoundException: If the customer has no account
            RedemptionNotAllowedException: If no redemption rule accepts the points
            InsufficientPointsException: If the available balance is too low
            InactiveAccountException: If the account is not active
        """
        async with self._operation("redeem_points", customer_id) as log:
            log = log.bind(points=points.value)
            log.info("points_redemption_requested")

            account = await self._get_account(customer_id)
            context = context if context is not None else TransactionContext.redemption()

            if not self._rules_engine.can_redeem(points, context):
                raise RedemptionNotAllowedException(points.value)

            redemption_value = self._rules_engine.calculate_redemption(points, context)

            transaction = account.redeem_points(points, context)

            await self._account_repo.save(account)
            await self._transaction_repo.save(transaction)

            await self._audit.log_points_redeemed(account, transaction, redemption_value)
            await self._dispatch_events(account)

            if redemption_value is not None:
                record_points_redeemed(
                    points.value,
                    redemption_value.amount,
                    redemption_value.currency.code,
                )

            log.info(
                "points_redeemed",
                redemption_value=(
                    redemption_value.to_dollars() if redemption_value else None
                ),
                transaction_id=str(transaction.id),
            )

            return RedemptionResult.from_entity(account, transaction, redemption_value)

    async def confirm_pending_points(
        self,
        customer_id: str,
        points: Optional[Points] = None,
    ) -> Points:
        """
        Move pending points into the available balance.

        Args:
            customer_id: Owner of the account
            points: How many to confirm; defaults to everything pending

        Returns:
            The points that were confirmed

        Raises:
            InsufficientPendingPointsException: If more than pending is requested
        """
        async with self._operation("confirm_pending_points", customer_id) as log:
            account = await self._get_account(customer_id)

            confirmed = account.confirm_pending_points(points)

            await self._account_repo.save(account)
            await self._audit.log_points_confirmed(account, confirmed)
            await self._dispatch_events(account)

            log.info("pending_points_confirmed", points_confirmed=confirmed.value)

            return confirmed

    async def adjust_points(
        self,
        customer_id: str,
        delta: int,
        reason: str,
        actor: Optional[str] = None,
    ) -> PointsTransaction:
        """
        Apply a manual correction; positive credits, zero or negative debits.

        Returns:
            The adjustment transaction
        """
        async with self._operation("adjust_points", customer_id) as log:
            account = await self._get_account(customer_id)

            transaction = account.adjust_points(delta, reason)

            await self._account_repo.save(account)
            await self._transaction_repo.save(transaction)
            await self._audit.log_points_adjusted(account, transaction, actor=actor)
            await self._dispatch_events(account)

            log.info(
                "points_adjusted",
                delta=delta,
                applied_points=transaction.context.get("applied_points"),
                reason=reason,
                actor=actor,
            )

            return transaction

    async def expire_points(self, customer_id: str, points: Points) -> PointsTransaction:
        """
        Expire available points, capped at the available balance.

        Returns:
            The expiration transaction carrying the amount actually expired
        """
        async with self._operation("expire_points", customer_id) as log:
            account = await self._get_account(customer_id)

            transaction = account.expire_points(points)

            await self._account_repo.save(account)
            await self._transaction_repo.save(transaction)
            await self._audit.log_points_expired(account, transaction)
            await self._dispatch_events(account)

            log.info(
                "points_expired",
                requested_points=points.value,
                expired_points=transaction.points.value,
            )

            return transaction

    async def suspend_account(self, customer_id: str, actor: Optional[str] = None) -> LoyaltyAccount:
        return await self._change_status(customer_id, "suspend", actor)

    async def activate_account(self, customer_id: str, actor: Optional[str] = None) -> LoyaltyAccount:
        return await self._change_status(customer_id, "activate", actor)

    async def close_account(self, customer_id: str, actor: Optional[str] = None) -> LoyaltyAccount:
        """Close an account; its available and pending points are forfeited."""
        return await self._change_status(customer_id, "close", actor)

    async def get_account_balance(self, customer_id: str) -> AccountBalanceResponse:
        account = await self._get_account(customer_id)
        return AccountBalanceResponse.from_entity(account)

    async def get_transaction_history(
        self,
        customer_id: str,
        limit: int = 50,
    ) -> TransactionHistoryResponse:
        """Recent transactions of a customer's account, newest first."""
        account = await self._get_account(customer_id)
        transactions = await self._transaction_repo.find_by_account_id(account.id, limit=limit)
        return TransactionHistoryResponse.from_entities(customer_id, transactions)

    async def _change_status(
        self,
        customer_id: str,
        transition: str,
        actor: Optional[str],
    ) -> LoyaltyAccount:
        async with self._operation(f"{transition}_account", customer_id) as log:
            account = await self._get_account(customer_id)
            previous_status = account.status

            getattr(account, transition)()

            await self._account_repo.save(account)
            await self._audit.log_status_changed(account, previous_status, actor=actor)
            await self._dispatch_events(account)

            log.info(
                "account_status_changed",
                previous_status=previous_status.value,
                new_status=account.status.value,
                actor=actor,
            )

            return account

    @asynccontextmanager
    async def holding_locks(self) -> AsyncGenerator[None, None]:
        """
        Keep every customer lock taken inside the block until it exits.

        Wrap the unit of work that commits the session so no other
        operation on the same account can read state that is not yet
        committed. Operations on an already held customer do not lock again.
        """
        async with AsyncExitStack() as stack:
            self._held_locks = stack
            try:
                yield
            finally:
                self._held_locks = None
                self._held_customers = set()

    @asynccontextmanager
    async def _operation(
        self,
        operation: str,
        customer_id: str,
    ) -> AsyncGenerator[structlog.stdlib.BoundLogger, None]:
        """Serialize the operation per customer and record its outcome."""
        log = logger.bind(operation=operation, customer_id=customer_id)

        async with await self._customer_lock(customer_id):
            try:
                yield log
            except Exception as e:
                record_account_operation(operation, success=False)
                log.warning(
                    "operation_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

        record_account_operation(operation, success=True)

    async def _customer_lock(self, customer_id: str):
        if self._held_locks is None:
            return self._locks.acquire(customer_id)
        if customer_id not in self._held_customers:
            await self._held_locks.enter_async_context(self._locks.acquire(customer_id))
            self._held_customers.add(customer_id)
        return nullcontext()

    async def _get_account(self, customer_id: str) -> LoyaltyAccount:
        try:
            return await self._account_repo.find_by_customer_id(customer_id)
        except AccountNotFoundException:
            logger.error("account_not_found", customer_id=customer_id)
            raise

    async def _dispatch_events(self, account: LoyaltyAccount) -> None:
        for event in account.get_events():
            delivered = await self._event_dispatcher.dispatch(event)
            if not delivered:
                logger.warning(
                    "event_dispatch_failed",
                    event_type=event.event_type,
                    account_id=str(account.id),
                )
        account.clear_events()
