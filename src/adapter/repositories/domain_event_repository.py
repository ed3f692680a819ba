"""SQLAlchemy implementation of DomainEventRepository"""

from datetime import datetime
from typing import Optional
from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.domain_event_repository import DomainEventRepository
from src.domain.domain_event import DomainEvent, DomainEventKind


class SqlAlchemyDomainEventRepository(DomainEventRepository):
    """
    SQLAlchemy implementation of DomainEventRepository

    Features:
    - processed_at set through a conditional UPDATE (first writer wins)
    - Unprocessed scan served by ix_domain_events_processed_at
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, event: DomainEvent) -> DomainEvent:
        self.session.add(event)
        await self.session.flush()
        await self.session.refresh(event)
        return event

    async def get_by_id(self, event_id: str) -> Optional[DomainEvent]:
        stmt = (
            select(DomainEvent)
            .where(DomainEvent.id == event_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_processed(self, event_id: str, processed_at: datetime) -> bool:
        """
        Set processed_at only while it is NULL

        Args:
            event_id: Event identifier
            processed_at: Completion timestamp

        Returns:
            True if the row was updated by this call
        """
        stmt = (
            update(DomainEvent)
            .where(DomainEvent.id == event_id)
            .where(DomainEvent.processed_at.is_(None))
            .values(processed_at=processed_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_unprocessed(self, limit: int = 100) -> list[DomainEvent]:
        stmt = (
            select(DomainEvent)
            .where(DomainEvent.processed_at.is_(None))
            .order_by(DomainEvent.occurred_at.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def has_event_since(self, kind: DomainEventKind, subject_id: str, since: datetime) -> bool:
        stmt = (
            select(func.count())
            .select_from(DomainEvent)
            .where(DomainEvent.kind == kind)
            .where(DomainEvent.subject_id == subject_id)
            .where(DomainEvent.occurred_at >= since)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0
