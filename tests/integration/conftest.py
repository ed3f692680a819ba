from datetime import date, datetime
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from src.depends import get_session
from src.domain.automation_rule import AutomationRule
from src.domain.belt_rank import BeltRank
from src.domain.discount_template import DiscountKind, DiscountScope, DiscountTemplate, UsageType
from src.domain.domain_event import DomainEvent, DomainEventKind
from src.domain.school_records import (
    AttendanceRecord,
    BeltAward,
    Enrollment,
    EnrollmentStatus,
    Payment,
    PaymentStatus,
    PaymentStudent,
    PaymentType,
    Program,
    Student,
)


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'eligibility_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class SchoolSeeder:
    """Inserts school records and discount configuration, committing each call"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, *rows):
        for row in rows:
            self.session.add(row)
        await self.session.commit()
        return rows[0] if len(rows) == 1 else rows

    async def student(self, student_id="student_1", family_id="family_1", birth_date=date(2014, 3, 9)):
        return await self._save(
            Student(
                id=student_id,
                family_id=family_id,
                first_name="Kim",
                last_name=student_id,
                birth_date=birth_date,
            )
        )

    async def payment(
        self,
        student_id="student_1",
        payment_date=date(2024, 1, 1),
        payment_type=PaymentType.MONTHLY_GROUP,
        status=PaymentStatus.SUCCEEDED,
    ):
        payment = Payment(family_id="family_1", status=status, type=payment_type, payment_date=payment_date)
        await self._save(payment)
        await self._save(PaymentStudent(payment_id=payment.id, student_id=student_id))
        return payment

    async def program(self, program_id="program_kids", is_active=True):
        return await self._save(Program(id=program_id, name=program_id, is_active=is_active))

    async def enrollment(self, student_id="student_1", program_id="program_kids", status=EnrollmentStatus.ACTIVE):
        return await self._save(Enrollment(student_id=student_id, program_id=program_id, status=status))

    async def belt(self, student_id="student_1", rank=BeltRank.GREEN, awarded_date=date(2024, 1, 1)):
        return await self._save(BeltAward(student_id=student_id, type=rank, awarded_date=awarded_date))

    async def attendance(self, student_id="student_1", count=1, present=True):
        rows = [
            AttendanceRecord(student_id=student_id, class_date=date(2024, 1, 1 + index), present=present)
            for index in range(count)
        ]
        return await self._save(*rows)

    async def template(
        self,
        template_id="tpl_1",
        scope=DiscountScope.PER_SUBJECT,
        usage_type=UsageType.ONE_TIME,
        max_uses=None,
        default_validity_days=None,
        is_active=True,
    ):
        return await self._save(
            DiscountTemplate(
                id=template_id,
                name=f"Template {template_id}",
                kind=DiscountKind.PERCENTAGE,
                value=Decimal("10.00"),
                scope=scope,
                usage_type=usage_type,
                max_uses=max_uses,
                default_validity_days=default_validity_days,
                is_active=is_active,
            )
        )

    async def rule(
        self,
        rule_id="rule_1",
        template_id="tpl_1",
        event_kind=DomainEventKind.RANK_PROMOTION,
        **fields,
    ):
        return await self._save(
            AutomationRule(
                id=rule_id,
                name=f"Rule {rule_id}",
                event_kind=event_kind,
                template_id=template_id,
                **fields,
            )
        )

    async def event(
        self,
        event_id="evt_1",
        subject_id="student_1",
        kind=DomainEventKind.RANK_PROMOTION,
        occurred_at=None,
    ):
        return await self._save(
            DomainEvent(
                id=event_id,
                kind=kind,
                subject_id=subject_id,
                payload={},
                occurred_at=occurred_at or datetime(2024, 5, 1, 9, 0),
            )
        )


@pytest_asyncio.fixture
async def seed(db_session):
    return SchoolSeeder(db_session)
