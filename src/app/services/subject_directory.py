"""Subject Directory Interface

Profile, rank, attendance and family facts about subjects (students).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional
from src.domain.belt_rank import BeltRank


@dataclass(frozen=True)
class SubjectProfile:
    subject_id: str
    family_id: Optional[str] = None
    birth_date: Optional[date] = None
    display_name: Optional[str] = None


class SubjectDirectory(ABC):

    @abstractmethod
    async def get_profile(self, subject_id: str) -> Optional[SubjectProfile]:
        """
        Retrieve a subject's profile

        Args:
            subject_id: Subject identifier

        Returns:
            SubjectProfile if the subject exists, None otherwise
        """
        pass

    @abstractmethod
    async def get_current_rank(self, subject_id: str) -> Optional[BeltRank]:
        """
        Most recently awarded rank

        Returns:
            BeltRank, or None when no rank was ever awarded
        """
        pass

    @abstractmethod
    async def get_attendance_count(self, subject_id: str) -> int:
        pass

    @abstractmethod
    async def get_family_size(self, family_id: str) -> int:
        """Number of subjects registered under a family"""
        pass

    @abstractmethod
    async def list_birthdays(self, on: date) -> list[SubjectProfile]:
        """Subjects whose birthday falls on the given date"""
        pass
