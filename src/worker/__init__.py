"""Background workers for the discount automation engine"""
from .event_processor import DomainEventProcessorWorker
from .birthday_events import BirthdayEventWorker

__all__ = ["DomainEventProcessorWorker", "BirthdayEventWorker"]
