"""Eligibility Clock

Pure date arithmetic used by the eligibility evaluators and rule matcher.
Every function takes "today" explicitly so callers can inject the clock.
"""

from datetime import date, datetime
from typing import Optional, Union

from src.domain.base import utc_now

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def today() -> date:
    """Current UTC calendar date"""
    return utc_now().date()


def elapsed_days(since: DateLike, on: DateLike) -> int:
    """Whole calendar days from `since` to `on` (negative if `since` is later)"""
    return (_as_date(on) - _as_date(since)).days


def is_within_days(since: DateLike, on: DateLike, validity_days: int) -> bool:
    """True while `on` is at most `validity_days` after `since` (inclusive)"""
    return elapsed_days(since, on) <= validity_days


def age_in_years(birth_date: DateLike, on: DateLike) -> int:
    """Completed years between birth_date and `on`"""
    born = _as_date(birth_date)
    current = _as_date(on)
    years = current.year - born.year
    if (current.month, current.day) < (born.month, born.day):
        years -= 1
    return years


def is_within_window(
    moment: datetime,
    valid_from: Optional[datetime],
    valid_until: Optional[datetime],
) -> bool:
    """Inclusive window check; a missing bound is unbounded"""
    if valid_from is not None and moment < valid_from:
        return False
    if valid_until is not None and moment > valid_until:
        return False
    return True


def is_birthday(birth_date: DateLike, on: DateLike) -> bool:
    """Same month and day; Feb 29 birthdays fall on Feb 28 in common years"""
    born = _as_date(birth_date)
    current = _as_date(on)
    if (born.month, born.day) == (current.month, current.day):
        return True
    if (born.month, born.day) == (2, 29) and (current.month, current.day) == (2, 28):
        try:
            date(current.year, 2, 29)
        except ValueError:
            return True
    return False
