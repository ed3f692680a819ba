"""Unit tests for ConstraintEvaluator and the violation priority order

Tests cover:
- Full event yields exactly {Full}
- Every violated constraint is reported; primary is the highest-priority one
- Not-found short-circuits
- Age and rank bounds, including unknown birth date and missing rank
"""

import pytest
from datetime import date

from src.domain.belt_rank import BeltRank
from src.domain.registration_eligibility import (
    VIOLATION_PRIORITY,
    ConstraintEvaluator,
    EventDescriptor,
    EventStatus,
    RegistrationEligibility,
    RegistrationViolation,
    SubjectDescriptor,
    resolve_primary,
)

TODAY = date(2024, 5, 1)


@pytest.fixture
def evaluator():
    return ConstraintEvaluator()


@pytest.fixture
def open_event():
    return EventDescriptor(
        event_id="event_1",
        status=EventStatus.REGISTRATION_OPEN,
        registration_deadline=date(2024, 5, 10),
        max_participants=20,
    )


@pytest.fixture
def subject():
    return SubjectDescriptor(
        subject_id="student_1",
        birth_date=date(2012, 1, 15),
        current_rank=BeltRank.GREEN,
    )


def evaluate(evaluator, event, subject, already_registered=False, confirmed=0):
    return evaluator.evaluate(
        event=event,
        subject=subject,
        already_registered=already_registered,
        confirmed_registrations=confirmed,
        today=TODAY,
    )


class TestSingleViolations:

    def test_eligible_when_nothing_fails(self, evaluator, open_event, subject):
        result = evaluate(evaluator, open_event, subject, confirmed=5)

        assert result.eligible is True
        assert result.primary_reason is None
        assert result.violations == frozenset()

    def test_full_event_reports_only_full(self, evaluator, subject):
        """
        Given: Open event with max_participants=20 and 20 confirmed registrations
        When: An otherwise eligible subject is evaluated
        Then: Ineligible with exactly {Full}
        """
        event = EventDescriptor(
            event_id="event_1", status=EventStatus.PUBLISHED, max_participants=20
        )

        result = evaluate(evaluator, event, subject, confirmed=20)

        assert result.eligible is False
        assert result.primary_reason == RegistrationViolation.FULL
        assert result.violations == frozenset({RegistrationViolation.FULL})

    def test_deadline_today_is_still_open(self, evaluator, subject):
        event = EventDescriptor(
            event_id="event_1", status=EventStatus.PUBLISHED, registration_deadline=TODAY
        )

        assert evaluate(evaluator, event, subject).eligible is True

    def test_deadline_yesterday_has_passed(self, evaluator, subject):
        event = EventDescriptor(
            event_id="event_1", status=EventStatus.PUBLISHED, registration_deadline=date(2024, 4, 30)
        )

        result = evaluate(evaluator, event, subject)

        assert result.violations == frozenset({RegistrationViolation.DEADLINE_PASSED})

    @pytest.mark.parametrize("status", [EventStatus.DRAFT, EventStatus.REGISTRATION_CLOSED, EventStatus.CANCELLED])
    def test_closed_statuses(self, evaluator, subject, status):
        event = EventDescriptor(event_id="event_1", status=status)

        result = evaluate(evaluator, event, subject)

        assert result.primary_reason == RegistrationViolation.REGISTRATION_NOT_OPEN


class TestAgeAndRank:

    def test_too_young_and_too_old(self, evaluator, subject):
        young = EventDescriptor(event_id="e", status=EventStatus.PUBLISHED, min_age=13)
        old = EventDescriptor(event_id="e", status=EventStatus.PUBLISHED, max_age=11)

        assert evaluate(evaluator, young, subject).violations == frozenset({RegistrationViolation.TOO_YOUNG})
        assert evaluate(evaluator, old, subject).violations == frozenset({RegistrationViolation.TOO_OLD})

    def test_unknown_birth_date_skips_age_bounds(self, evaluator):
        event = EventDescriptor(event_id="e", status=EventStatus.PUBLISHED, min_age=6, max_age=12)
        subject = SubjectDescriptor(subject_id="s", birth_date=None)

        result = evaluate(evaluator, event, subject)

        assert result.violations == frozenset()
        assert result.eligible is True

    def test_missing_rank_is_treated_as_white(self, evaluator):
        event = EventDescriptor(
            event_id="e", status=EventStatus.PUBLISHED, min_rank=BeltRank.WHITE, max_rank=BeltRank.YELLOW
        )
        subject = SubjectDescriptor(subject_id="s", current_rank=None)

        assert evaluate(evaluator, event, subject).eligible is True

    def test_rank_bounds(self, evaluator, subject):
        too_low = EventDescriptor(event_id="e", status=EventStatus.PUBLISHED, min_rank=BeltRank.BLUE)
        too_high = EventDescriptor(event_id="e", status=EventStatus.PUBLISHED, max_rank=BeltRank.ORANGE)

        assert evaluate(evaluator, too_low, subject).primary_reason == RegistrationViolation.RANK_TOO_LOW
        assert evaluate(evaluator, too_high, subject).primary_reason == RegistrationViolation.RANK_TOO_HIGH


class TestCompletenessAndPriority:

    def test_all_violations_reported_with_highest_priority_primary(self, evaluator):
        """
        Given: A closed, past-deadline, full event with age and rank bounds the subject misses
        When: A subject already registered is evaluated
        Then: Every violation is listed and AlreadyRegistered is primary
        """
        event = EventDescriptor(
            event_id="e",
            status=EventStatus.REGISTRATION_CLOSED,
            registration_deadline=date(2024, 4, 1),
            max_participants=1,
            min_age=16,
            min_rank=BeltRank.BROWN,
        )
        subject = SubjectDescriptor(subject_id="s", birth_date=date(2015, 1, 1), current_rank=BeltRank.WHITE)

        result = evaluate(evaluator, event, subject, already_registered=True, confirmed=1)

        assert result.violations == frozenset({
            RegistrationViolation.ALREADY_REGISTERED,
            RegistrationViolation.REGISTRATION_NOT_OPEN,
            RegistrationViolation.DEADLINE_PASSED,
            RegistrationViolation.FULL,
            RegistrationViolation.TOO_YOUNG,
            RegistrationViolation.RANK_TOO_LOW,
        })
        assert result.primary_reason == RegistrationViolation.ALREADY_REGISTERED
        assert result.primary_reason in result.violations
        assert result.ordered_violations()[0] == result.primary_reason

    def test_missing_event_short_circuits(self, evaluator, subject):
        result = evaluate(evaluator, None, subject, already_registered=True)

        assert result.violations == frozenset({RegistrationViolation.EVENT_NOT_FOUND})

    def test_missing_subject_short_circuits(self, evaluator, open_event):
        result = evaluate(evaluator, open_event, None)

        assert result.primary_reason == RegistrationViolation.SUBJECT_NOT_FOUND

    def test_resolve_primary_is_order_independent(self):
        members = [RegistrationViolation.RANK_TOO_HIGH, RegistrationViolation.FULL, RegistrationViolation.TOO_OLD]

        assert resolve_primary(members) == RegistrationViolation.FULL
        assert resolve_primary(reversed(members)) == RegistrationViolation.FULL

    def test_resolve_primary_rejects_empty_set(self):
        with pytest.raises(ValueError):
            resolve_primary([])

    def test_priority_covers_every_violation(self):
        assert set(VIOLATION_PRIORITY) == set(RegistrationViolation)

    def test_from_violations_empty_is_eligible(self):
        assert RegistrationEligibility.from_violations([]).eligible is True
