"""Discount Code Repository Interface

Defines the contract for discount code persistence. Usage counters are only
ever changed through the atomic increment/decrement operations.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.discount_code import DiscountCode


class DiscountCodeRepository(ABC):
    """
    Repository interface for DiscountCode persistence

    increment_uses/decrement_uses are single UPDATE statements so concurrent
    redemptions and compensations never lose an update.
    """

    @abstractmethod
    async def create(self, code: DiscountCode) -> DiscountCode:
        """
        Create a new discount code

        Args:
            code: DiscountCode entity to persist

        Returns:
            Created DiscountCode
        """
        pass

    @abstractmethod
    async def get_by_id(self, code_id: str) -> Optional[DiscountCode]:
        """
        Retrieve code by ID, always reading current column values

        Args:
            code_id: Code identifier

        Returns:
            DiscountCode if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[DiscountCode]:
        """
        Retrieve code by its human-enterable value (case-insensitive)

        Args:
            code: Code string as typed by the user

        Returns:
            DiscountCode if found, None otherwise
        """
        pass

    @abstractmethod
    async def code_exists(self, code: str) -> bool:
        pass

    @abstractmethod
    async def increment_uses(self, code_id: str) -> bool:
        """
        Reserve one use of an active code with remaining capacity

        Args:
            code_id: Code identifier

        Returns:
            True if a use was reserved, False if the code is inactive or exhausted
        """
        pass

    @abstractmethod
    async def decrement_uses(self, code_id: str) -> None:
        """
        Release one use, never going below zero

        Args:
            code_id: Code identifier
        """
        pass
