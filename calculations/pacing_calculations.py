"""
Goal Pacing Calculations Module
Expected progress for a running goal, linear or weighted by historical sales

Formula Summary:
- linear expected % = elapsed days / total days * 100
- pattern expected % = sum of day weights elapsed / sum of day weights in the window * 100
  where a day's weight is its average sales share of the month in previous years
- on track = actual percentage >= expected percentage
- cashier goals: expected % = elapsed / total * target percentage
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional

import numpy as np
import pandas as pd

from .entities import CashierGoalProgress, ExpectedProgress, GoalPacing, PeriodWindow
from .period_calculations import DateLike, elapsed_days, to_calendar_date

logger = logging.getLogger(__name__)

HISTORY_YEARS = 2
MONTH_DAYS = np.arange(1, 32)


def linear_expected_percentage(window: PeriodWindow, today: DateLike) -> float:
    return min(100.0, elapsed_days(window, today) / window.total_days * 100)


def build_month_pattern(daily_totals: Dict[date, Decimal], month: int,
                        years: Optional[Iterable[int]] = None,
                        days_in_month: int = 31) -> pd.DataFrame:
    """
    Average sales per day-of-month across history years, as weights

    Args:
        daily_totals: closed-sale totals per calendar day
        month: month number (1-12)
        years: years to read (None = every year present)
        days_in_month: used for the equal-weight fallback

    Returns:
        DataFrame indexed by day (1-31) with avg_sales, sample_count and weight
    """
    pattern = pd.DataFrame(index=pd.Index(MONTH_DAYS, name="day"))
    pattern["avg_sales"] = 0.0
    pattern["sample_count"] = 0

    history = pd.DataFrame(
        [(d.year, d.month, d.day, float(v)) for d, v in (daily_totals or {}).items()],
        columns=["year", "month", "day", "sales"],
    )
    history = history[history["month"] == month]
    if years is not None:
        history = history[history["year"].isin(list(years))]

    if not history.empty:
        per_year = history.groupby(["year", "day"])["sales"].sum().reset_index()
        stats = per_year.groupby("day")["sales"].agg(["mean", "count"])
        pattern.loc[stats.index, "avg_sales"] = stats["mean"].to_numpy()
        pattern.loc[stats.index, "sample_count"] = stats["count"].to_numpy()

    total = pattern["avg_sales"].sum()
    if total > 0:
        pattern["weight"] = pattern["avg_sales"] / total
    else:
        pattern["weight"] = np.where(pattern.index <= days_in_month, 1.0 / days_in_month, 0.0)

    return pattern


def _linear_result(window: PeriodWindow, today: DateLike, explanation: str) -> ExpectedProgress:
    linear = linear_expected_percentage(window, today)
    return ExpectedProgress(
        expected_percentage=linear,
        linear_percentage=linear,
        pattern_based=False,
        confidence="low",
        explanation=explanation,
    )


def calculate_expected_progress(window: PeriodWindow, today: DateLike,
                                daily_totals: Optional[Dict[date, Decimal]] = None) -> ExpectedProgress:
    """
    Expected percentage of a goal that should be done by today

    Falls back to linear pacing for windows spanning two months and when
    there is no sales history for the window's month.
    """
    day = to_calendar_date(today)

    if window.start.month != window.end.month or window.start.year != window.end.year:
        return _linear_result(window, day, "Window spans two months - linear pacing")

    history_years = range(day.year - HISTORY_YEARS, day.year)
    pattern = build_month_pattern(daily_totals or {}, window.start.month, history_years,
                                  days_in_month=window.end.day)
    if pattern["sample_count"].sum() == 0:
        return _linear_result(window, day, "No sales history - linear pacing")

    start_day, end_day = window.start.day, window.end.day
    current_day = min(day.day, end_day) if day >= window.start else start_day - 1

    in_window = pattern.loc[start_day:end_day]
    total_weight = in_window["weight"].sum()
    elapsed_weight = in_window.loc[:current_day, "weight"].sum() if current_day >= start_day else 0.0

    expected = float(elapsed_weight / total_weight * 100) if total_weight > 0 else 0.0
    total_days = end_day - start_day + 1
    linear = max(0, current_day - start_day + 1) / total_days * 100

    avg_samples = in_window["sample_count"].sum() / total_days
    if avg_samples >= 2:
        confidence = "high"
    elif avg_samples >= 1:
        confidence = "medium"
    else:
        confidence = "low"

    diff = expected - linear
    if abs(diff) < 2:
        explanation = "Pattern close to linear"
    elif diff > 0:
        explanation = f"Stronger period (+{diff:.0f}% over linear)"
    else:
        explanation = f"Weaker period ({diff:.0f}% under linear)"

    return ExpectedProgress(
        expected_percentage=round(expected, 2),
        linear_percentage=round(linear, 2),
        pattern_based=True,
        confidence=confidence,
        explanation=explanation,
    )


def evaluate_pacing(percentage: Decimal, window: PeriodWindow, today: DateLike,
                    daily_totals: Optional[Dict[date, Decimal]] = None) -> GoalPacing:
    """On-track flag for a sales goal (0% expected before it starts, 100% after it ends)"""
    day = to_calendar_date(today)
    elapsed = elapsed_days(window, day)

    if day < window.start:
        return GoalPacing(elapsed, window.total_days, 0.0, float(percentage) >= 0.0)
    if day > window.end:
        return GoalPacing(elapsed, window.total_days, 100.0, float(percentage) >= 100.0)

    expected = calculate_expected_progress(window, day, daily_totals)
    return GoalPacing(
        elapsed_days=elapsed,
        total_days=window.total_days,
        expected_percentage=expected.expected_percentage,
        is_on_track=float(percentage) >= expected.expected_percentage,
        pattern_based=expected.pattern_based,
        confidence=expected.confidence,
    )


def cashier_pacing(progress: CashierGoalProgress, today: DateLike) -> GoalPacing:
    window = PeriodWindow(progress.week_start, progress.week_end)
    elapsed = elapsed_days(window, today)
    expected = elapsed / window.total_days * float(progress.target_percentage)
    return GoalPacing(
        elapsed_days=elapsed,
        total_days=window.total_days,
        expected_percentage=round(expected, 2),
        is_on_track=float(progress.percentage_achieved) >= expected,
    )
