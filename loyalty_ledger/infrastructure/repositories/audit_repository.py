"""SQLAlchemy implementation of AuditRepository."""

from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from loyalty_ledger.domain.entities import AuditRecord
from loyalty_ledger.domain.interfaces import AuditRepository
from loyalty_ledger.infrastructure.database.models import AuditRecordModel, naive_utc


class SqlAlchemyAuditRepository(AuditRepository):
    """SQLAlchemy implementation of the audit trail."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def store(self, record: AuditRecord) -> AuditRecord:
        self._session.add(self._to_model(record))
        await self._session.flush()
        return record

    async def store_many(self, records: List[AuditRecord]) -> None:
        self._session.add_all([self._to_model(record) for record in records])
        await self._session.flush()

    async def find_by_entity(
        self,
        entity_id: str,
        limit: int = 100,
    ) -> List[AuditRecord]:
        stmt = (
            select(AuditRecordModel)
            .where(AuditRecordModel.entity_id == entity_id)
            .order_by(AuditRecordModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def find_by_action(self, action: str, limit: int = 100) -> List[AuditRecord]:
        stmt = (
            select(AuditRecordModel)
            .where(AuditRecordModel.action == action)
            .order_by(AuditRecordModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def find_by_date_range(
        self,
        start: datetime,
        end: datetime,
        limit: int = 1000,
    ) -> List[AuditRecord]:
        stmt = (
            select(AuditRecordModel)
            .where(AuditRecordModel.created_at.between(start, end))
            .order_by(AuditRecordModel.created_at)
            .limit(limit)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def delete_older_than(self, cutoff: datetime) -> int:
        stmt = delete(AuditRecordModel).where(AuditRecordModel.created_at < cutoff)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount

    def _to_model(self, record: AuditRecord) -> AuditRecordModel:
        return AuditRecordModel(
            id=str(record.id),
            entity_type=record.entity_type,
            entity_id=record.entity_id,
            action=record.action,
            actor=record.actor,
            payload=record.payload,
            ip_address=record.ip_address,
            user_agent=record.user_agent,
            created_at=record.created_at,
        )

    def _to_entity(self, model: AuditRecordModel) -> AuditRecord:
        """Convert database model to domain entity."""
        return AuditRecord(
            id=UUID(model.id),
            entity_type=model.entity_type,
            entity_id=model.entity_id,
            action=model.action,
            actor=model.actor,
            payload=dict(model.payload or {}),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            created_at=naive_utc(model.created_at),
        )
