"""Domain Event Repository Interface

Defines the contract for the append-only event ledger.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from src.domain.domain_event import DomainEvent, DomainEventKind


class DomainEventRepository(ABC):
    """
    Repository interface for DomainEvent persistence

    Events are never updated except for the one-time processed_at marker.
    """

    @abstractmethod
    async def create(self, event: DomainEvent) -> DomainEvent:
        """
        Append a new domain event

        Args:
            event: DomainEvent entity to persist

        Returns:
            Created DomainEvent
        """
        pass

    @abstractmethod
    async def get_by_id(self, event_id: str) -> Optional[DomainEvent]:
        """
        Retrieve event by ID

        Args:
            event_id: Event identifier

        Returns:
            DomainEvent if found, None otherwise
        """
        pass

    @abstractmethod
    async def mark_processed(self, event_id: str, processed_at: datetime) -> bool:
        """
        Set processed_at if it is still unset

        Args:
            event_id: Event identifier
            processed_at: Completion timestamp

        Returns:
            True if this call set the marker, False if it was already set
        """
        pass

    @abstractmethod
    async def list_unprocessed(self, limit: int = 100) -> list[DomainEvent]:
        """
        Oldest events whose rules have not been evaluated yet

        Args:
            limit: Maximum number of events

        Returns:
            DomainEvent list ordered by occurred_at ascending
        """
        pass

    @abstractmethod
    async def has_event_since(self, kind: DomainEventKind, subject_id: str, since: datetime) -> bool:
        """
        Whether an event of this kind was recorded for the subject since a moment

        Args:
            kind: Domain event kind
            subject_id: Subject identifier
            since: Inclusive lower bound on occurred_at

        Returns:
            True if at least one such event exists
        """
        pass
