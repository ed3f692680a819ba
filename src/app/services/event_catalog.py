"""Event Catalog Interface

Scheduled events and their registrations, as seen by the registration
eligibility check.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.registration_eligibility import EventDescriptor


class EventCatalog(ABC):

    @abstractmethod
    async def get_event(self, event_id: str) -> Optional[EventDescriptor]:
        pass

    @abstractmethod
    async def has_registration(self, event_id: str, subject_id: str) -> bool:
        """True if any registration row exists for the pair, whatever its status"""
        pass

    @abstractmethod
    async def count_confirmed_registrations(self, event_id: str) -> int:
        pass
