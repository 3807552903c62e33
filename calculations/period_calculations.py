"""
Period Calculations Module
Resolves weekly / monthly goal windows and classifies dates against them

Weeks run Monday to Sunday. All comparisons are by calendar day; the caller
injects "now" so that results never depend on the system clock.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Union

from .entities import GoalPeriod, PeriodWindow

DateLike = Union[date, datetime, str]


class InvalidPeriodError(ValueError):
    """Raised for a period value other than weekly / monthly"""


def coerce_period(period: Union[GoalPeriod, str]) -> GoalPeriod:
    if isinstance(period, GoalPeriod):
        return period
    try:
        return GoalPeriod(str(period).strip().lower())
    except ValueError:
        raise InvalidPeriodError(f"Unknown period {period!r} - expected 'weekly' or 'monthly'") from None


def to_calendar_date(value: DateLike) -> date:
    """Truncate datetimes / ISO strings to a calendar date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def resolve_window(period: Union[GoalPeriod, str], reference_date: DateLike) -> PeriodWindow:
    """
    Compute the canonical window containing the reference date

    Args:
        period: 'weekly' or 'monthly'
        reference_date: any date inside the wanted window

    Returns:
        PeriodWindow with inclusive start / end
    """
    period = coerce_period(period)
    reference = to_calendar_date(reference_date)

    if period is GoalPeriod.WEEKLY:
        start = reference - timedelta(days=reference.weekday())
        return PeriodWindow(start, start + timedelta(days=6))

    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return PeriodWindow(reference.replace(day=1), reference.replace(day=last_day))


def is_within_window(value: DateLike, start: DateLike, end: DateLike) -> bool:
    return to_calendar_date(start) <= to_calendar_date(value) <= to_calendar_date(end)


def is_finished(end: DateLike, now: DateLike) -> bool:
    """True once now is past the end of the window's last day"""
    # now.date() > end  <=>  now > end 23:59:59.999999, in now's own timezone
    return to_calendar_date(now) > to_calendar_date(end)


def is_current(window: PeriodWindow, now: DateLike) -> bool:
    return window.contains(to_calendar_date(now)) and not is_finished(window.end, now)


def windows_overlap(first: PeriodWindow, second: PeriodWindow) -> bool:
    return first.start <= second.end and first.end >= second.start


def previous_week_window(reference_date: DateLike) -> PeriodWindow:
    """The full week before the one containing the reference date (the week a payout run pays)"""
    reference = to_calendar_date(reference_date)
    return resolve_window(GoalPeriod.WEEKLY, reference - timedelta(days=7))


def payment_date_for(reference_date: DateLike) -> date:
    """Bonuses are paid on the Monday of the reference week"""
    return resolve_window(GoalPeriod.WEEKLY, reference_date).start


def elapsed_days(window: PeriodWindow, today: DateLike) -> int:
    day = to_calendar_date(today)
    if day < window.start:
        return 0
    if day > window.end:
        return window.total_days
    return (day - window.start).days + 1
