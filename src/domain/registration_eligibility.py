"""Event Registration Eligibility

Constraint evaluation for registering a subject to a scheduled event, and the
fixed priority order used to pick the one reason shown to the subject.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from src.domain.belt_rank import BeltRank, rank_order
from src.domain.eligibility_clock import age_in_years


class EventStatus(str, Enum):
    """Lifecycle status of a scheduled event"""
    DRAFT = "draft"
    PUBLISHED = "published"
    REGISTRATION_OPEN = "registration_open"
    REGISTRATION_CLOSED = "registration_closed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


OPEN_EVENT_STATUSES: FrozenSet[EventStatus] = frozenset(
    {EventStatus.PUBLISHED, EventStatus.REGISTRATION_OPEN}
)


class RegistrationViolation(str, Enum):
    """Closed set of reasons a registration attempt can be refused"""
    EVENT_NOT_FOUND = "event_not_found"
    SUBJECT_NOT_FOUND = "subject_not_found"
    REGISTRATION_NOT_OPEN = "registration_not_open"
    DEADLINE_PASSED = "registration_deadline_passed"
    ALREADY_REGISTERED = "already_registered"
    FULL = "event_full"
    TOO_YOUNG = "student_too_young"
    TOO_OLD = "student_too_old"
    RANK_TOO_LOW = "student_belt_rank_too_low"
    RANK_TOO_HIGH = "student_belt_rank_too_high"


# Highest priority first. Changing this order changes what subjects are told.
VIOLATION_PRIORITY: tuple[RegistrationViolation, ...] = (
    RegistrationViolation.EVENT_NOT_FOUND,
    RegistrationViolation.SUBJECT_NOT_FOUND,
    RegistrationViolation.ALREADY_REGISTERED,
    RegistrationViolation.REGISTRATION_NOT_OPEN,
    RegistrationViolation.DEADLINE_PASSED,
    RegistrationViolation.FULL,
    RegistrationViolation.TOO_YOUNG,
    RegistrationViolation.TOO_OLD,
    RegistrationViolation.RANK_TOO_LOW,
    RegistrationViolation.RANK_TOO_HIGH,
)

_PRIORITY_INDEX = {violation: index for index, violation in enumerate(VIOLATION_PRIORITY)}


def resolve_primary(violations: Iterable[RegistrationViolation]) -> RegistrationViolation:
    """Highest-priority member of a non-empty violation set"""
    members = set(violations)
    if not members:
        raise ValueError("Cannot resolve a primary reason from an empty violation set")
    return min(members, key=_PRIORITY_INDEX.__getitem__)


@dataclass(frozen=True)
class EventDescriptor:
    """Registration-relevant attributes of a scheduled event"""

    event_id: str
    status: EventStatus
    registration_deadline: Optional[date] = None
    max_participants: Optional[int] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    min_rank: Optional[BeltRank] = None
    max_rank: Optional[BeltRank] = None


@dataclass(frozen=True)
class SubjectDescriptor:
    """Registration-relevant attributes of a subject"""

    subject_id: str
    birth_date: Optional[date] = None
    current_rank: Optional[BeltRank] = None


@dataclass(frozen=True)
class RegistrationEligibility:
    """Outcome of a registration check; `violations` is the complete set"""

    eligible: bool
    primary_reason: Optional[RegistrationViolation] = None
    violations: FrozenSet[RegistrationViolation] = field(default_factory=frozenset)

    @classmethod
    def from_violations(cls, violations: Iterable[RegistrationViolation]) -> "RegistrationEligibility":
        members = frozenset(violations)
        if not members:
            return cls(eligible=True)
        return cls(eligible=False, primary_reason=resolve_primary(members), violations=members)

    def ordered_violations(self) -> list[RegistrationViolation]:
        return sorted(self.violations, key=_PRIORITY_INDEX.__getitem__)


class ConstraintEvaluator:
    """
    Evaluates every registration constraint independently

    Missing event or subject short-circuits, since nothing else can be checked.
    Every other constraint is evaluated even when an earlier one failed.
    """

    def __init__(self, open_statuses: FrozenSet[EventStatus] = OPEN_EVENT_STATUSES):
        self._open_statuses = open_statuses

    def evaluate(
        self,
        event: Optional[EventDescriptor],
        subject: Optional[SubjectDescriptor],
        already_registered: bool,
        confirmed_registrations: int,
        today: date,
    ) -> RegistrationEligibility:
        if event is None:
            return RegistrationEligibility.from_violations({RegistrationViolation.EVENT_NOT_FOUND})
        if subject is None:
            return RegistrationEligibility.from_violations({RegistrationViolation.SUBJECT_NOT_FOUND})

        violations: set[RegistrationViolation] = set()

        if already_registered:
            violations.add(RegistrationViolation.ALREADY_REGISTERED)

        if event.status not in self._open_statuses:
            violations.add(RegistrationViolation.REGISTRATION_NOT_OPEN)

        if event.registration_deadline is not None and event.registration_deadline < today:
            violations.add(RegistrationViolation.DEADLINE_PASSED)

        if event.max_participants is not None and confirmed_registrations >= event.max_participants:
            violations.add(RegistrationViolation.FULL)

        violations.update(self._age_violations(event, subject, today))
        violations.update(self._rank_violations(event, subject))

        return RegistrationEligibility.from_violations(violations)

    @staticmethod
    def _age_violations(
        event: EventDescriptor, subject: SubjectDescriptor, today: date
    ) -> set[RegistrationViolation]:
        if event.min_age is None and event.max_age is None:
            return set()
        if subject.birth_date is None:
            # unknown age is not compared against either bound
            return set()

        age = age_in_years(subject.birth_date, today)
        found = set()
        if event.min_age is not None and age < event.min_age:
            found.add(RegistrationViolation.TOO_YOUNG)
        if event.max_age is not None and age > event.max_age:
            found.add(RegistrationViolation.TOO_OLD)
        return found

    @staticmethod
    def _rank_violations(event: EventDescriptor, subject: SubjectDescriptor) -> set[RegistrationViolation]:
        subject_order = rank_order(subject.current_rank)
        found = set()
        if event.min_rank is not None and subject_order < rank_order(event.min_rank):
            found.add(RegistrationViolation.RANK_TOO_LOW)
        if event.max_rank is not None and subject_order > rank_order(event.max_rank):
            found.add(RegistrationViolation.RANK_TOO_HIGH)
        return found
