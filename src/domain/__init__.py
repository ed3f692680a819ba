from .base import BaseModel, generate_uuid
from .domain_event import DomainEvent, DomainEventKind
from .discount_template import DiscountTemplate, DiscountKind, DiscountScope, UsageType
from .automation_rule import AutomationRule
from .discount_code import DiscountCode
from .discount_assignment import DiscountAssignment
from .discount_code_usage import DiscountCodeUsage
from .school_records import (
    Student,
    Payment,
    PaymentStudent,
    PaymentStatus,
    PaymentType,
    Program,
    Enrollment,
    EnrollmentStatus,
    BeltAward,
    AttendanceRecord,
    ScheduledEvent,
    EventRegistration,
    RegistrationStatus,
)

__all__ = [
    "BaseModel",
    "generate_uuid",
    "DomainEvent",
    "DomainEventKind",
    "DiscountTemplate",
    "DiscountKind",
    "DiscountScope",
    "UsageType",
    "AutomationRule",
    "DiscountCode",
    "DiscountAssignment",
    "DiscountCodeUsage",
    "Student",
    "Payment",
    "PaymentStudent",
    "PaymentStatus",
    "PaymentType",
    "Program",
    "Enrollment",
    "EnrollmentStatus",
    "BeltAward",
    "AttendanceRecord",
    "ScheduledEvent",
    "EventRegistration",
    "RegistrationStatus",
]
