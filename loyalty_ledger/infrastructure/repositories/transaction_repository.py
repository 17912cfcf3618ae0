"""SQLAlchemy implementation of TransactionRepository."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from loyalty_ledger.domain.entities import PointsTransaction, TransactionType
from loyalty_ledger.domain.interfaces import TransactionRepository
from loyalty_ledger.domain.value_objects import Points, TransactionContext
from loyalty_ledger.infrastructure.database.models import PointsTransactionModel, naive_utc


class SqlAlchemyTransactionRepository(TransactionRepository):
    """
    SQLAlchemy implementation of the PointsTransaction repository.

    Transactions are immutable except for ``processed_at``, which is the
    only column updated when an existing record is saved again.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, transaction: PointsTransaction) -> PointsTransaction:
        model = await self._session.get(PointsTransactionModel, str(transaction.id))

        if model is None:
            self._session.add(self._to_model(transaction))
        else:
            model.processed_at = transaction.processed_at

        await self._session.flush()

        return transaction

    async def save_many(self, transactions: List[PointsTransaction]) -> None:
        self._session.add_all([self._to_model(txn) for txn in transactions])
        await self._session.flush()

    async def find_by_id(self, transaction_id: UUID) -> Optional[PointsTransaction]:
        model = await self._session.get(PointsTransactionModel, str(transaction_id))

        if model is None:
            return None

        return self._to_entity(model)

    async def find_by_account_id(
        self,
        account_id: UUID,
        limit: int = 100,
    ) -> List[PointsTransaction]:
        stmt = (
            select(PointsTransactionModel)
            .where(PointsTransactionModel.account_id == str(account_id))
            .order_by(PointsTransactionModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def find_by_type(
        self,
        transaction_type: TransactionType,
        limit: int = 100,
    ) -> List[PointsTransaction]:
        stmt = (
            select(PointsTransactionModel)
            .where(PointsTransactionModel.type == transaction_type.value)
            .order_by(PointsTransactionModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def find_by_date_range(
        self,
        start: datetime,
        end: datetime,
        limit: int = 1000,
    ) -> List[PointsTransaction]:
        stmt = (
            select(PointsTransactionModel)
            .where(PointsTransactionModel.created_at.between(start, end))
            .order_by(PointsTransactionModel.created_at)
            .limit(limit)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def find_unprocessed(self, limit: int = 100) -> List[PointsTransaction]:
        stmt = (
            select(PointsTransactionModel)
            .where(PointsTransactionModel.processed_at.is_(None))
            .order_by(PointsTransactionModel.created_at)
            .limit(limit)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def total_points_earned(self) -> int:
        return await self._sum_points(TransactionType.EARN)

    async def total_points_redeemed(self) -> int:
        return await self._sum_points(TransactionType.REDEEM)

    async def _sum_points(self, transaction_type: TransactionType) -> int:
        stmt = select(func.coalesce(func.sum(PointsTransactionModel.points), 0)).where(
            PointsTransactionModel.type == transaction_type.value
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    def _to_model(self, transaction: PointsTransaction) -> PointsTransactionModel:
        return PointsTransactionModel(
            id=str(transaction.id),
            account_id=str(transaction.account_id),
            type=transaction.type.value,
            points=transaction.points.value,
            context=transaction.context.to_dict(),
            created_at=transaction.created_at,
            processed_at=transaction.processed_at,
        )

    def _to_entity(self, model: PointsTransactionModel) -> PointsTransaction:
        """Convert database model to domain entity."""
        return PointsTransaction(
            id=UUID(model.id),
            account_id=UUID(model.account_id),
            type=TransactionType(model.type),
            points=Points(model.points),
            context=TransactionContext.from_dict(model.context or {}),
            created_at=naive_utc(model.created_at),
            processed_at=naive_utc(model.processed_at),
        )
