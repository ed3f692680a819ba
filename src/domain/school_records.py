"""School Read Models

Tables owned by other subsystems (family registration, payments, classes,
events). The engine only reads them, through the SQL collaborator adapters.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, String, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid, utc_now
from src.domain.belt_rank import BeltRank
from src.domain.registration_eligibility import EventStatus


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PaymentType(str, Enum):
    MONTHLY_GROUP = "monthly_group"
    YEARLY_GROUP = "yearly_group"
    INDIVIDUAL_SESSION = "individual_session"
    OTHER = "other"
    STORE_PURCHASE = "store_purchase"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    TRIAL = "trial"
    WAITLIST = "waitlist"
    INACTIVE = "inactive"
    COMPLETED = "completed"
    DROPPED = "dropped"


class RegistrationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    WAITLIST = "waitlist"


class Student(BaseModel, table=True):
    __tablename__ = "students"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    family_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True, index=True),
    )
    first_name: str = Field(sa_column=Column(String(100), nullable=False))
    last_name: str = Field(sa_column=Column(String(100), nullable=False))
    birth_date: Optional[date] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)


class Payment(BaseModel, table=True):
    """
    Payment made by a family

    A payment covers one or more students through PaymentStudent rows.
    """

    __tablename__ = "payments"
    __table_args__ = (
        Index('ix_payments_status_type', 'status', 'type'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    family_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
    )
    status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    type: PaymentType = Field(default=PaymentType.OTHER)
    payment_date: Optional[date] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)


class PaymentStudent(BaseModel, table=True):
    __tablename__ = "payment_students"
    __table_args__ = (
        UniqueConstraint('payment_id', 'student_id', name='uq_payment_students'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    payment_id: str = Field(
        sa_column=Column(String, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False),
    )
    student_id: str = Field(
        sa_column=Column(String, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True),
    )


class Program(BaseModel, table=True):
    __tablename__ = "programs"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    name: str = Field(sa_column=Column(String(255), nullable=False))
    is_active: bool = Field(default=True)


class Enrollment(BaseModel, table=True):
    """A student's enrollment in a program; active and trial count as enrolled"""

    __tablename__ = "enrollments"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    student_id: str = Field(
        sa_column=Column(String, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    program_id: str = Field(
        sa_column=Column(String, ForeignKey("programs.id"), nullable=False),
    )
    status: EnrollmentStatus = Field(default=EnrollmentStatus.ACTIVE)
    enrolled_at: datetime = Field(default_factory=utc_now)


class BeltAward(BaseModel, table=True):
    __tablename__ = "belt_awards"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    student_id: str = Field(
        sa_column=Column(String, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    type: BeltRank = Field(description="Belt awarded")
    awarded_date: date = Field(default_factory=lambda: utc_now().date())


class AttendanceRecord(BaseModel, table=True):
    __tablename__ = "attendance"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    student_id: str = Field(
        sa_column=Column(String, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    class_date: date = Field(default_factory=lambda: utc_now().date())
    present: bool = Field(default=True)


class ScheduledEvent(BaseModel, table=True):
    """
    Scheduled event (tournament, seminar, belt test...)

    Domain Rules:
    - Registration is open only in the published and registration_open statuses
    - Null limits impose no constraint
    """

    __tablename__ = "events"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    title: str = Field(sa_column=Column(String(255), nullable=False))
    status: EventStatus = Field(default=EventStatus.DRAFT)
    start_date: Optional[date] = Field(default=None)
    registration_deadline: Optional[date] = Field(default=None)
    max_participants: Optional[int] = Field(default=None)
    min_age: Optional[int] = Field(default=None)
    max_age: Optional[int] = Field(default=None)
    min_belt_rank: Optional[BeltRank] = Field(default=None)
    max_belt_rank: Optional[BeltRank] = Field(default=None)


class EventRegistration(BaseModel, table=True):
    __tablename__ = "event_registrations"
    __table_args__ = (
        Index('ix_event_registrations_event_student', 'event_id', 'student_id'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    event_id: str = Field(
        sa_column=Column(String, ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
    )
    student_id: str = Field(
        sa_column=Column(String, ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
    )
    registration_status: RegistrationStatus = Field(default=RegistrationStatus.PENDING)
    registered_at: datetime = Field(default_factory=utc_now)
