"""Automation Rule Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.automation_rule import AutomationRule
from src.domain.domain_event import DomainEventKind


class AutomationRuleRepository(ABC):

    @abstractmethod
    async def list_active_for_kind(self, kind: DomainEventKind) -> list[AutomationRule]:
        """
        Active rules triggered by an event kind

        The validity window is not applied here; callers check it against
        their own clock.

        Args:
            kind: Domain event kind

        Returns:
            AutomationRule list ordered by created_at
        """
        pass

    @abstractmethod
    async def get_by_id(self, rule_id: str) -> Optional[AutomationRule]:
        pass

    @abstractmethod
    async def create(self, rule: AutomationRule) -> AutomationRule:
        pass
