from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .payment_history_service import SqlPaymentHistoryService
from .enrollment_service import SqlEnrollmentService
from .subject_directory import SqlSubjectDirectory
from .event_catalog import SqlEventCatalog

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "SqlPaymentHistoryService",
    "SqlEnrollmentService",
    "SqlSubjectDirectory",
    "SqlEventCatalog",
]
