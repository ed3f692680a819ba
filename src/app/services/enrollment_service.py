"""Enrollment Service Interface"""

from abc import ABC, abstractmethod
from typing import Iterable


class EnrollmentService(ABC):

    @abstractmethod
    async def get_active_program_ids(self, subject_id: str) -> set[str]:
        """
        Programs the subject is currently enrolled in

        Args:
            subject_id: Subject identifier

        Returns:
            Set of program IDs (active or trial enrollments)
        """
        pass

    @abstractmethod
    async def get_inactive_program_ids(self, program_ids: Iterable[str]) -> set[str]:
        """
        Subset of program_ids that are unknown or inactive

        Used to reject automation rules scoped to programs nobody can enroll in.
        """
        pass
