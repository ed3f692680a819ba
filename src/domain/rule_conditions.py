"""Automation Rule Conditions

The closed set of predicates an automation rule may place on the subject of a
domain event. Only conditions that are present are checked.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.domain.belt_rank import LOWEST_RANK, BeltRank, rank_order
from src.domain.eligibility_clock import age_in_years


class RuleConditions(BaseModel):
    """
    Typed rule conditions

    Stored as a JSON object on the rule; unknown keys are rejected so a typo
    in the admin form cannot silently turn into "no constraint".
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    min_age: Optional[int] = Field(default=None, ge=0, description="Minimum age in whole years")
    max_age: Optional[int] = Field(default=None, ge=0, description="Maximum age in whole years")
    min_rank: Optional[BeltRank] = Field(default=None, description="Minimum belt rank")
    rank: Optional[BeltRank] = Field(default=None, description="Exact belt rank required")
    min_attendance: Optional[int] = Field(
        default=None, ge=0, description="Minimum number of attended classes"
    )
    min_family_size: Optional[int] = Field(
        default=None, ge=1, description="Minimum number of students in the subject's family"
    )

    @model_validator(mode="after")
    def check_bounds(self) -> "RuleConditions":
        if self.min_age is not None and self.max_age is not None and self.min_age > self.max_age:
            raise ValueError("min_age cannot exceed max_age")
        return self

    @property
    def needs_age(self) -> bool:
        return self.min_age is not None or self.max_age is not None

    @property
    def needs_rank(self) -> bool:
        return self.min_rank is not None or self.rank is not None

    @property
    def needs_attendance(self) -> bool:
        return self.min_attendance is not None

    @property
    def needs_family_size(self) -> bool:
        return self.min_family_size is not None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


@dataclass(frozen=True)
class SubjectAttributes:
    """Subject facts the conditions are checked against; None means unknown"""

    birth_date: Optional[date] = None
    current_rank: Optional[BeltRank] = None
    attendance_count: Optional[int] = None
    family_size: Optional[int] = None


def conditions_met(conditions: RuleConditions, subject: SubjectAttributes, today: date) -> bool:
    if conditions.needs_age:
        if subject.birth_date is None:
            return False
        age = age_in_years(subject.birth_date, today)
        if conditions.min_age is not None and age < conditions.min_age:
            return False
        if conditions.max_age is not None and age > conditions.max_age:
            return False

    if conditions.min_rank is not None and rank_order(subject.current_rank) < rank_order(conditions.min_rank):
        return False

    if conditions.rank is not None and (subject.current_rank or LOWEST_RANK) != conditions.rank:
        return False

    if conditions.min_attendance is not None:
        if (subject.attendance_count or 0) < conditions.min_attendance:
            return False

    # a subject without a family is not held to a family size
    if conditions.min_family_size is not None and subject.family_size is not None:
        if subject.family_size < conditions.min_family_size:
            return False

    return True
