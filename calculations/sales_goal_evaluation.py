"""
Sales Goal Evaluation Module
Turns aggregated sales into progress for individual and team sales goals

Formula Summary:
- current_value = seller total (individual) or store total (team) inside the goal window
- percentage = current_value / target_value * 100 (0 when target is 0)
- achieved = current_value >= target_value
- is_finished = today > week_end
"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence

from .entities import (
    AggregatedGoalProgress, AggregateResult, GoalPeriod, GoalProgress, GoalType,
    PaymentReceipt, SaleRecord, SalesGoal, ZERO,
)
from .goal_rules import is_target_met, safe_percentage
from .period_calculations import DateLike, is_finished, to_calendar_date
from .sales_aggregation import aggregate_sales

logger = logging.getLogger(__name__)


def aggregate_for_sales_goal(goal: SalesGoal, sales: Iterable[SaleRecord], receipts: Iterable[PaymentReceipt],
                             seller_name: Optional[str] = None,
                             closed_statuses: Optional[Iterable[str]] = None) -> AggregateResult:
    """
    Aggregate the sales a goal is measured against

    Args:
        goal: sales goal
        sales, receipts: snapshot covering at least the goal window
        seller_name: full name of the goal's seller (individual goals only)
        closed_statuses: statuses counting as closed (None = defaults)

    Returns:
        AggregateResult for the goal's store and window; empty for an
        individual goal whose seller could not be resolved
    """
    if goal.type is GoalType.INDIVIDUAL:
        if not seller_name:
            logger.warning(f"⚠️ Goal {goal.id}: seller {goal.seller_id!r} not resolved - progress is zero")
            return AggregateResult()
        return aggregate_sales(sales, receipts, goal.window, [goal.store_id], seller_name, closed_statuses)

    return aggregate_sales(sales, receipts, goal.window, [goal.store_id], None, closed_statuses)


def evaluate_sales_goal(goal: SalesGoal, aggregate: AggregateResult, today: DateLike) -> GoalProgress:
    current_value = aggregate.total_value
    target_value = goal.target_value

    return GoalProgress(
        goal_id=goal.id,
        goal_type=goal.type,
        period=goal.period,
        store_id=goal.store_id,
        seller_id=goal.seller_id,
        week_start=goal.week_start,
        week_end=goal.week_end,
        current_value=current_value,
        target_value=target_value,
        percentage=safe_percentage(current_value, target_value),
        achieved=is_target_met(current_value, target_value),
        is_finished=is_finished(goal.week_end, today),
    )


def select_current_goals(goals: Iterable[SalesGoal], today: DateLike,
                         periods: Sequence[GoalPeriod] = (GoalPeriod.WEEKLY,)) -> List[SalesGoal]:
    """Active goals of the given periods whose window contains today and is not finished"""
    day = to_calendar_date(today)
    selected = [
        goal for goal in goals
        if goal.is_active
        and goal.period in periods
        and goal.window.contains(day)
        and not is_finished(goal.week_end, day)
    ]
    return sorted(selected, key=lambda goal: (goal.week_start, goal.store_id, goal.id))


def aggregate_goal_progress(progresses: Sequence[GoalProgress], period: GoalPeriod,
                            store_label: str) -> Optional[AggregatedGoalProgress]:
    """
    Sum several goals into one progress figure (manager / admin dashboards)

    Returns:
        AggregatedGoalProgress spanning the earliest start to the latest end,
        or None when there is nothing to aggregate
    """
    if not progresses:
        return None

    target_value = sum((p.target_value for p in progresses), ZERO)
    current_value = sum((p.current_value for p in progresses), ZERO)
    week_start: date = min(p.week_start for p in progresses)
    week_end: date = max(p.week_end for p in progresses)

    return AggregatedGoalProgress(
        period=period,
        store_label=store_label,
        goals_count=len(progresses),
        week_start=week_start,
        week_end=week_end,
        target_value=target_value,
        current_value=current_value,
        percentage=safe_percentage(current_value, target_value),
    )
