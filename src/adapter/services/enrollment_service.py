"""SQL Enrollment Service"""

from typing import Iterable
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.enrollment_service import EnrollmentService
from src.domain.school_records import Enrollment, EnrollmentStatus, Program

ENROLLED_STATUSES = (EnrollmentStatus.ACTIVE, EnrollmentStatus.TRIAL)


class SqlEnrollmentService(EnrollmentService):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_program_ids(self, subject_id: str) -> set[str]:
        stmt = (
            select(Enrollment.program_id)
            .where(Enrollment.student_id == subject_id)
            .where(Enrollment.status.in_(ENROLLED_STATUSES))
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def get_inactive_program_ids(self, program_ids: Iterable[str]) -> set[str]:
        requested = set(program_ids)
        if not requested:
            return set()
        stmt = (
            select(Program.id)
            .where(Program.id.in_(requested))
            .where(Program.is_active == True)  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return requested - set(result.scalars().all())
