"""SQL Subject Directory

Subjects are students; rank is the latest belt award and attendance counts
classes marked present.
"""

from datetime import date
from typing import Optional
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.subject_directory import SubjectDirectory, SubjectProfile
from src.domain.belt_rank import BeltRank
from src.domain.eligibility_clock import is_birthday
from src.domain.school_records import AttendanceRecord, BeltAward, Student


def _to_profile(student: Student) -> SubjectProfile:
    return SubjectProfile(
        subject_id=student.id,
        family_id=student.family_id,
        birth_date=student.birth_date,
        display_name=f"{student.first_name} {student.last_name}",
    )


class SqlSubjectDirectory(SubjectDirectory):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_profile(self, subject_id: str) -> Optional[SubjectProfile]:
        stmt = select(Student).where(Student.id == subject_id)
        result = await self.session.execute(stmt)
        student = result.scalar_one_or_none()
        return _to_profile(student) if student else None

    async def get_current_rank(self, subject_id: str) -> Optional[BeltRank]:
        stmt = (
            select(BeltAward.type)
            .where(BeltAward.student_id == subject_id)
            .order_by(BeltAward.awarded_date.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_attendance_count(self, subject_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(AttendanceRecord)
            .where(AttendanceRecord.student_id == subject_id)
            .where(AttendanceRecord.present == True)  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_family_size(self, family_id: str) -> int:
        stmt = select(func.count()).select_from(Student).where(Student.family_id == family_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def list_birthdays(self, on: date) -> list[SubjectProfile]:
        # month/day extraction differs between SQLite and PostgreSQL, so filter here
        stmt = select(Student).where(Student.birth_date.is_not(None))
        result = await self.session.execute(stmt)
        return [
            _to_profile(student)
            for student in result.scalars().all()
            if is_birthday(student.birth_date, on)
        ]
