"""Payment History Service Interface

Read-only access to the payments made for a subject.
"""

from abc import ABC, abstractmethod
from src.domain.payment_eligibility import PaymentRecord


class PaymentHistoryService(ABC):

    @abstractmethod
    async def get_successful_payments(self, subject_id: str) -> list[PaymentRecord]:
        """
        Successful payments covering a subject, most recent first

        Args:
            subject_id: Subject identifier

        Returns:
            PaymentRecord list; empty when the subject never paid
        """
        pass

    @abstractmethod
    async def count_successful_payments(self, subject_id: str) -> int:
        pass
