from .unit_of_work import UnitOfWork
from .notification_service import NotificationService, DiscountIssuedNotice
from .payment_history_service import PaymentHistoryService
from .enrollment_service import EnrollmentService
from .subject_directory import SubjectDirectory, SubjectProfile
from .event_catalog import EventCatalog

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "DiscountIssuedNotice",
    "PaymentHistoryService",
    "EnrollmentService",
    "SubjectDirectory",
    "SubjectProfile",
    "EventCatalog",
]
