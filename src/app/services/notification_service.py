"""Notification Service Interface

Defines the contract for telling families about automatically issued codes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class DiscountIssuedNotice:
    """What a family is told when a code is issued to one of its subjects"""

    subject_id: str
    code: str
    code_id: str
    rule_name: str
    discount_kind: str
    value: Decimal
    family_id: Optional[str] = None
    valid_until: Optional[datetime] = None


class NotificationService(ABC):
    """
    Abstract notification service

    Implementations can deliver via:
    - Webhook (HTTP POST)
    - Email
    - Push
    - etc.

    Delivery is best effort: issuance is never rolled back because a
    notification failed.
    """

    @abstractmethod
    async def send_discount_issued(self, notice: DiscountIssuedNotice) -> bool:
        """
        Notify about a newly issued discount code

        Args:
            notice: DiscountIssuedNotice describing the code

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
