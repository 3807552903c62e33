#!/usr/bin/env python3
"""
Tests for goal window resolution and finished / current classification
"""

from datetime import date, datetime, timedelta

import pytest

from calculations.entities import GoalPeriod, PeriodWindow
from calculations.period_calculations import (
    InvalidPeriodError, elapsed_days, is_current, is_finished, is_within_window, payment_date_for,
    previous_week_window, resolve_window, to_calendar_date, windows_overlap,
)


def test_weekly_window_starts_on_monday():
    window = resolve_window("weekly", date(2024, 5, 15))
    assert window == PeriodWindow(date(2024, 5, 13), date(2024, 5, 19))


def test_weekly_window_for_sunday_belongs_to_previous_monday():
    window = resolve_window(GoalPeriod.WEEKLY, date(2024, 5, 19))
    assert window.start == date(2024, 5, 13)
    assert window.end == date(2024, 5, 19)


def test_weekly_window_for_every_day_of_a_year():
    day = date(2024, 1, 1)
    while day.year == 2024:
        window = resolve_window("weekly", day)
        assert window.start.weekday() == 0
        assert (window.end - window.start).days == 6
        assert window.contains(day)
        day += timedelta(days=1)


@pytest.mark.parametrize("reference, start, end", [
    (date(2024, 2, 10), date(2024, 2, 1), date(2024, 2, 29)),
    (date(2023, 2, 28), date(2023, 2, 1), date(2023, 2, 28)),
    (date(2024, 12, 31), date(2024, 12, 1), date(2024, 12, 31)),
    (datetime(2024, 4, 30, 23, 59), date(2024, 4, 1), date(2024, 4, 30)),
])
def test_monthly_window_is_full_calendar_month(reference, start, end):
    assert resolve_window("monthly", reference) == PeriodWindow(start, end)


def test_invalid_period_fails_fast():
    with pytest.raises(InvalidPeriodError):
        resolve_window("yearly", date(2024, 5, 15))


def test_period_is_case_insensitive():
    assert resolve_window(" Weekly ", date(2024, 5, 15)).start == date(2024, 5, 13)


def test_within_window_is_inclusive_and_ignores_time():
    assert is_within_window(date(2024, 5, 13), date(2024, 5, 13), date(2024, 5, 19))
    assert is_within_window(datetime(2024, 5, 19, 23, 59, 59), date(2024, 5, 13), date(2024, 5, 19))
    assert is_within_window("2024-05-19T10:00:00", "2024-05-13", "2024-05-19")
    assert not is_within_window(date(2024, 5, 20), date(2024, 5, 13), date(2024, 5, 19))


def test_finished_only_after_end_of_last_day():
    end = date(2024, 5, 19)
    assert not is_finished(end, datetime(2024, 5, 19, 23, 59, 59))
    assert is_finished(end, datetime(2024, 5, 20, 0, 0, 1))
    assert is_finished(end, date(2024, 6, 1))


def test_past_goal_is_finished_and_running_goal_is_current():
    today = date(2024, 5, 22)
    past = PeriodWindow(date(2024, 5, 13), date(2024, 5, 19))
    running = PeriodWindow(date(2024, 5, 20), date(2024, 5, 26))

    assert is_finished(past.end, today)
    assert not is_current(past, today)
    assert not is_finished(running.end, today)
    assert is_current(running, today)


def test_previous_week_and_payment_date():
    assert previous_week_window(date(2024, 5, 22)) == PeriodWindow(date(2024, 5, 13), date(2024, 5, 19))
    assert payment_date_for(date(2024, 5, 22)) == date(2024, 5, 20)


def test_elapsed_days_clamps_to_window():
    window = PeriodWindow(date(2024, 5, 13), date(2024, 5, 19))
    assert elapsed_days(window, date(2024, 5, 12)) == 0
    assert elapsed_days(window, date(2024, 5, 13)) == 1
    assert elapsed_days(window, date(2024, 5, 15)) == 3
    assert elapsed_days(window, date(2024, 6, 1)) == 7


def test_windows_overlap():
    week = PeriodWindow(date(2024, 5, 13), date(2024, 5, 19))
    assert windows_overlap(week, resolve_window("monthly", date(2024, 5, 1)))
    assert windows_overlap(week, PeriodWindow(date(2024, 5, 19), date(2024, 5, 25)))
    assert not windows_overlap(week, PeriodWindow(date(2024, 5, 20), date(2024, 5, 26)))


def test_to_calendar_date_accepts_iso_strings():
    assert to_calendar_date("2024-05-15") == date(2024, 5, 15)
    assert to_calendar_date("2024-05-15T08:30:00-03:00") == date(2024, 5, 15)
