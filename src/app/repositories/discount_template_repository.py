"""Discount Template Repository Interface"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional
from src.domain.discount_template import DiscountTemplate


class DiscountTemplateRepository(ABC):

    @abstractmethod
    async def get_by_id(self, template_id: str) -> Optional[DiscountTemplate]:
        pass

    @abstractmethod
    async def get_many(self, template_ids: Iterable[str]) -> dict[str, DiscountTemplate]:
        """
        Retrieve several templates at once

        Args:
            template_ids: Template identifiers

        Returns:
            Mapping of template ID to template; missing IDs are absent
        """
        pass
