"""Unit tests for the eligibility clock helpers"""

from datetime import date, datetime

from src.domain.eligibility_clock import (
    age_in_years,
    elapsed_days,
    is_birthday,
    is_within_days,
    is_within_window,
)


class TestElapsedDays:

    def test_counts_calendar_days(self):
        assert elapsed_days(date(2024, 1, 1), date(2024, 2, 10)) == 40

    def test_accepts_datetimes(self):
        assert elapsed_days(datetime(2024, 1, 1, 23, 59), datetime(2024, 1, 2, 0, 1)) == 1

    def test_negative_when_since_is_later(self):
        assert elapsed_days(date(2024, 1, 10), date(2024, 1, 1)) == -9


class TestIsWithinDays:

    def test_boundary_is_inclusive(self):
        assert is_within_days(date(2024, 1, 1), date(2024, 2, 5), 35) is True

    def test_one_day_past_boundary(self):
        assert is_within_days(date(2024, 1, 1), date(2024, 2, 6), 35) is False


class TestAgeInYears:

    def test_day_before_birthday(self):
        assert age_in_years(date(2010, 6, 15), date(2024, 6, 14)) == 13

    def test_on_birthday(self):
        assert age_in_years(date(2010, 6, 15), date(2024, 6, 15)) == 14


class TestIsWithinWindow:

    def test_missing_bounds_are_unbounded(self):
        assert is_within_window(datetime(2024, 1, 1), None, None) is True

    def test_bounds_are_inclusive(self):
        start = datetime(2024, 1, 1)
        end = datetime(2024, 1, 31)
        assert is_within_window(start, start, end) is True
        assert is_within_window(end, start, end) is True

    def test_outside_window(self):
        start = datetime(2024, 1, 1)
        end = datetime(2024, 1, 31)
        assert is_within_window(datetime(2023, 12, 31), start, end) is False
        assert is_within_window(datetime(2024, 2, 1), start, end) is False


class TestIsBirthday:

    def test_same_month_and_day(self):
        assert is_birthday(date(2012, 3, 9), date(2024, 3, 9)) is True
        assert is_birthday(date(2012, 3, 9), date(2024, 3, 10)) is False

    def test_leap_day_birthday_on_feb_28_of_common_year(self):
        assert is_birthday(date(2012, 2, 29), date(2023, 2, 28)) is True

    def test_leap_day_birthday_not_on_feb_28_of_leap_year(self):
        assert is_birthday(date(2012, 2, 29), date(2024, 2, 28)) is False
        assert is_birthday(date(2012, 2, 29), date(2024, 2, 29)) is True
