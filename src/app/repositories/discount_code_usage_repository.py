"""Discount Code Usage Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.discount_code_usage import DiscountCodeUsage


class DiscountCodeUsageRepository(ABC):

    @abstractmethod
    async def create(self, usage: DiscountCodeUsage) -> Optional[DiscountCodeUsage]:
        """
        Record a redemption

        Args:
            usage: DiscountCodeUsage to persist

        Returns:
            Created usage, or None if the payment already consumed a code
            (the pending transaction is rolled back in that case)
        """
        pass

    @abstractmethod
    async def get_by_payment_id(self, payment_id: str) -> Optional[DiscountCodeUsage]:
        pass

    @abstractmethod
    async def delete_by_id(self, usage_id: str) -> int:
        """
        Delete one usage row

        Returns:
            Rows deleted (0 when another caller already deleted it)
        """
        pass

    @abstractmethod
    async def count_for_code(self, code_id: str) -> int:
        pass
