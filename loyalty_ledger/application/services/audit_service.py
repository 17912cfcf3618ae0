"""Audit service - writes the structured audit trail for ledger operations."""

from typing import Any, Dict, Optional

import structlog

from loyalty_ledger.core.context import get_ip_address, get_user_agent
from loyalty_ledger.domain.entities import (
    AccountStatus,
    AuditRecord,
    LoyaltyAccount,
    PointsTransaction,
)
from loyalty_ledger.domain.interfaces import AuditRepository
from loyalty_ledger.domain.value_objects import Money, Points, TransactionContext
from loyalty_ledger.service.fraud import FraudResult

logger = structlog.get_logger(__name__)

ACCOUNT_ENTITY = "loyalty_account"
TRANSACTION_ENTITY = "points_transaction"
FRAUD_ENTITY = "fraud_detection"


class AuditService:
    """
    Records what happened to accounts and transactions.

    IP address and user agent are taken from the bound request context.
    """

    def __init__(self, audit_repository: AuditRepository):
        self._audit_repo = audit_repository

    async def log_account_created(
        self,
        account: LoyaltyAccount,
        actor: Optional[str] = None,
    ) -> AuditRecord:
        return await self._store(
            entity_type=ACCOUNT_ENTITY,
            entity_id=str(account.id),
            action="account_created",
            actor=actor,
            payload={
                "customer_id": account.customer_id,
                "initial_status": account.status.value,
                "created_at": account.created_at.isoformat() + "Z",
            },
        )

    async def log_points_earned(
        self,
        account: LoyaltyAccount,
        transaction: PointsTransaction,
        amount: Money,
        actor: Optional[str] = None,
    ) -> AuditRecord:
        return await self._store(
            entity_type=TRANSACTION_ENTITY,
            entity_id=str(transaction.id),
            action="points_earned",
            actor=actor,
            payload={
                "account_id": str(account.id),
                "customer_id": account.customer_id,
                "points_earned": transaction.points.value,
                "transaction_amount": amount.to_dollars(),
                "currency": amount.currency.code,
                "context": transaction.context.to_dict(),
                "balance_after": account.available_points.value,
                "pending_points_after": account.pending_points.value,
            },
        )

    async def log_points_redeemed(
        self,
        account: LoyaltyAccount,
        transaction: PointsTransaction,
        redemption_value: Optional[Money] = None,
        actor: Optional[str] = None,
    ) -> AuditRecord:
        return await self._store(
            entity_type=TRANSACTION_ENTITY,
            entity_id=str(transaction.id),
            action="points_redeemed",
            actor=actor,
            payload={
                "account_id": str(account.id),
                "customer_id": account.customer_id,
                "points_redeemed": transaction.points.value,
                "redemption_value": (
                    redemption_value.to_dollars() if redemption_value else None
                ),
                "redemption_currency": (
                    redemption_value.currency.code if redemption_value else None
                ),
                "context": transaction.context.to_dict(),
                "balance_after": account.available_points.value,
            },
        )

    async def log_points_confirmed(
        self,
        account: LoyaltyAccount,
        confirmed_points: Points,
        actor: Optional[str] = None,
    ) -> AuditRecord:
        return await self._store(
            entity_type=ACCOUNT_ENTITY,
            entity_id=str(account.id),
            action="points_confirmed",
            actor=actor,
            payload={
                "customer_id": account.customer_id,
                "points_confirmed": confirmed_points.value,
                "available_balance_after": account.available_points.value,
                "pending_balance_after": account.pending_points.value,
            },
        )

    async def log_points_adjusted(
        self,
        account: LoyaltyAccount,
        transaction: PointsTransaction,
        actor: Optional[str] = None,
    ) -> AuditRecord:
        return await self._store(
            entity_type=TRANSACTION_ENTITY,
            entity_id=str(transaction.id),
            action="points_adjusted",
            actor=actor,
            payload={
                "account_id": str(account.id),
                "customer_id": account.customer_id,
                "reason": transaction.context.get("reason"),
                "direction": transaction.context.get("direction"),
                "requested_points": transaction.points.value,
                "applied_points": transaction.context.get("applied_points"),
                "balance_after": account.available_points.value,
                "lifetime_points_after": account.lifetime_points.value,
            },
        )

    async def log_points_expired(
        self,
        account: LoyaltyAccount,
        transaction: PointsTransaction,
        actor: Optional[str] = None,
    ) -> AuditRecord:
        return await self._store(
            entity_type=TRANSACTION_ENTITY,
            entity_id=str(transaction.id),
            action="points_expired",
            actor=actor,
            payload={
                "account_id": str(account.id),
                "customer_id": account.customer_id,
                "requested_points": transaction.context.get("requested_points"),
                "expired_points": transaction.points.value,
                "balance_after": account.available_points.value,
            },
        )

    async def log_status_changed(
        self,
        account: LoyaltyAccount,
        previous_status: AccountStatus,
        actor: Optional[str] = None,
    ) -> AuditRecord:
        return await self._store(
            entity_type=ACCOUNT_ENTITY,
            entity_id=str(account.id),
            action="account_status_changed",
            actor=actor,
            payload={
                "customer_id": account.customer_id,
                "previous_status": previous_status.value,
                "new_status": account.status.value,
                "available_balance_after": account.available_points.value,
                "pending_balance_after": account.pending_points.value,
            },
        )

    async def log_fraud_attempt(
        self,
        account: LoyaltyAccount,
        amount: Money,
        context: TransactionContext,
        fraud_result: FraudResult,
        actor: Optional[str] = None,
    ) -> AuditRecord:
        action_taken = "blocked" if fraud_result.should_block else "flagged"

        record = await self._store(
            entity_type=FRAUD_ENTITY,
            entity_id=str(account.id),
            action="fraud_detected",
            actor=actor,
            payload={
                "customer_id": account.customer_id,
                "transaction_amount": amount.to_dollars(),
                "currency": amount.currency.code,
                "fraud_score": fraud_result.score,
                "fraud_reasons": list(fraud_result.reasons),
                "action_taken": action_taken,
                "context": context.to_dict(),
            },
        )

        logger.warning(
            "fraud_attempt_audited",
            account_id=str(account.id),
            fraud_score=fraud_result.score,
            action_taken=action_taken,
        )

        return record

    async def _store(
        self,
        entity_type: str,
        entity_id: str,
        action: str,
        payload: Dict[str, Any],
        actor: Optional[str] = None,
    ) -> AuditRecord:
        record = AuditRecord(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            payload=payload,
            actor=actor,
            ip_address=get_ip_address(),
            user_agent=get_user_agent(),
        )

        await self._audit_repo.store(record)

        logger.debug(
            "audit_record_stored",
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
        )

        return record
