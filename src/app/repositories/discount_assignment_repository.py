"""Discount Assignment Repository Interface

The assignment ledger. At-most-once issuance per (rule, event, subject,
template) is enforced by a storage uniqueness constraint behind assign().
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.discount_assignment import DiscountAssignment


class DiscountAssignmentRepository(ABC):
    """
    Repository interface for DiscountAssignment persistence
    """

    @abstractmethod
    async def assign(self, assignment: DiscountAssignment) -> Optional[DiscountAssignment]:
        """
        Insert an assignment, absorbing a uniqueness conflict

        On conflict the whole pending transaction is rolled back, so anything
        written alongside the assignment (the codes of the same rule firing) is
        discarded too.

        Args:
            assignment: DiscountAssignment to persist

        Returns:
            Created DiscountAssignment, or None if (rule, event, subject,
            template) was already assigned
        """
        pass

    @abstractmethod
    async def count_for_subject(self, rule_id: str, subject_id: str) -> int:
        """
        Number of distinct events a rule has fired for a subject on

        A multi-template firing has one assignment per template and counts
        once.

        Args:
            rule_id: Rule identifier
            subject_id: Subject identifier

        Returns:
            Distinct event count
        """
        pass

    @abstractmethod
    async def delete_for_code(self, code_id: str) -> int:
        """
        Delete the assignments that issued a code

        Args:
            code_id: Code identifier

        Returns:
            Number of rows deleted
        """
        pass

    @abstractmethod
    async def list_assignments(
        self,
        subject_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[DiscountAssignment]:
        """
        Assignments, newest first, optionally for one subject

        Args:
            subject_id: Optional subject filter
            limit: Maximum number of rows
            offset: Rows to skip

        Returns:
            DiscountAssignment list
        """
        pass
