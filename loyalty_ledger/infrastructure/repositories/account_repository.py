"""SQLAlchemy implementation of AccountRepository."""

from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from loyalty_ledger.domain.entities import AccountStatus, LoyaltyAccount
from loyalty_ledger.domain.exceptions import AccountNotFoundException
from loyalty_ledger.domain.interfaces import AccountRepository
from loyalty_ledger.domain.value_objects import Points
from loyalty_ledger.infrastructure.database.models import LoyaltyAccountModel, naive_utc


class SqlAlchemyAccountRepository(AccountRepository):
    """
    SQLAlchemy implementation of the LoyaltyAccount repository.

    Uses SQLAlchemy async session for database operations. Changes are
    flushed, not committed; the session owner decides the transaction.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_id(self, account_id: UUID) -> LoyaltyAccount:
        model = await self._session.get(LoyaltyAccountModel, str(account_id))

        if model is None:
            raise AccountNotFoundException(str(account_id))

        return self._to_entity(model)

    async def find_by_customer_id(self, customer_id: str) -> LoyaltyAccount:
        stmt = select(LoyaltyAccountModel).where(
            LoyaltyAccountModel.customer_id == customer_id
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            raise AccountNotFoundException(customer_id)

        return self._to_entity(model)

    async def find_by_customer_ids(self, customer_ids: List[str]) -> List[LoyaltyAccount]:
        if not customer_ids:
            return []

        stmt = (
            select(LoyaltyAccountModel)
            .where(LoyaltyAccountModel.customer_id.in_(customer_ids))
            .order_by(LoyaltyAccountModel.created_at)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def save(self, account: LoyaltyAccount) -> LoyaltyAccount:
        """Insert the account or update its stored balances and status."""
        model = await self._session.get(LoyaltyAccountModel, str(account.id))

        if model is None:
            model = LoyaltyAccountModel(
                id=str(account.id),
                customer_id=account.customer_id,
                created_at=account.created_at,
            )
            self._session.add(model)

        model.available_points = account.available_points.value
        model.pending_points = account.pending_points.value
        model.lifetime_points = account.lifetime_points.value
        model.status = account.status.value
        model.last_activity_at = account.last_activity_at
        model.updated_at = datetime.utcnow()

        await self._session.flush()

        return account

    async def delete(self, account_id: UUID) -> None:
        model = await self._session.get(LoyaltyAccountModel, str(account_id))

        if model is None:
            raise AccountNotFoundException(str(account_id))

        await self._session.delete(model)
        await self._session.flush()

    async def find_inactive(self, since: datetime) -> List[LoyaltyAccount]:
        """Accounts whose last activity, or creation if they never had any, predates ``since``."""
        stmt = (
            select(LoyaltyAccountModel)
            .where(
                or_(
                    LoyaltyAccountModel.last_activity_at < since,
                    (LoyaltyAccountModel.last_activity_at.is_(None))
                    & (LoyaltyAccountModel.created_at < since),
                )
            )
            .order_by(LoyaltyAccountModel.created_at)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def find_with_pending_points(self) -> List[LoyaltyAccount]:
        stmt = (
            select(LoyaltyAccountModel)
            .where(LoyaltyAccountModel.pending_points > 0)
            .order_by(LoyaltyAccountModel.created_at)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def exists(self, customer_id: str) -> bool:
        stmt = select(func.count()).where(LoyaltyAccountModel.customer_id == customer_id)
        result = await self._session.execute(stmt)
        return result.scalar_one() > 0

    async def count_total(self) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(LoyaltyAccountModel)
        )
        return result.scalar_one()

    async def count_active(self) -> int:
        stmt = select(func.count()).where(
            LoyaltyAccountModel.status == AccountStatus.ACTIVE.value
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    def _to_entity(self, model: LoyaltyAccountModel) -> LoyaltyAccount:
        """Convert database model to domain entity."""
        return LoyaltyAccount(
            id=UUID(model.id),
            customer_id=model.customer_id,
            available_points=Points(model.available_points),
            pending_points=Points(model.pending_points),
            lifetime_points=Points(model.lifetime_points),
            status=AccountStatus(model.status),
            created_at=naive_utc(model.created_at),
            last_activity_at=naive_utc(model.last_activity_at),
        )
