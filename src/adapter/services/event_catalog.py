"""SQL Event Catalog"""

from typing import Optional
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.event_catalog import EventCatalog
from src.domain.registration_eligibility import EventDescriptor
from src.domain.school_records import EventRegistration, RegistrationStatus, ScheduledEvent


class SqlEventCatalog(EventCatalog):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_event(self, event_id: str) -> Optional[EventDescriptor]:
        stmt = select(ScheduledEvent).where(ScheduledEvent.id == event_id)
        result = await self.session.execute(stmt)
        event = result.scalar_one_or_none()
        if event is None:
            return None
        return EventDescriptor(
            event_id=event.id,
            status=event.status,
            registration_deadline=event.registration_deadline,
            max_participants=event.max_participants,
            min_age=event.min_age,
            max_age=event.max_age,
            min_rank=event.min_belt_rank,
            max_rank=event.max_belt_rank,
        )

    async def has_registration(self, event_id: str, subject_id: str) -> bool:
        stmt = (
            select(func.count())
            .select_from(EventRegistration)
            .where(EventRegistration.event_id == event_id)
            .where(EventRegistration.student_id == subject_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def count_confirmed_registrations(self, event_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(EventRegistration)
            .where(EventRegistration.event_id == event_id)
            .where(EventRegistration.registration_status == RegistrationStatus.CONFIRMED)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
