"""
Cashier Goal Evaluation Module
Measures the share of store sales paid through a set of payment methods

Formula Summary:
- target_method_sales = sum of receipt net values for the goal's methods
- total_store_sales = every closed sale of the store in the window (all sellers)
- percentage_achieved = target_method_sales / total_store_sales * 100 (0 without sales)
- is_goal_met = percentage_achieved >= target_percentage
- bonus_value = target_method_sales * (achieved or not-achieved rate) / 100
"""

import logging
from typing import Iterable, List, Optional

from .currency import round_currency
from .entities import AggregateResult, CashierGoal, CashierGoalProgress, PaymentReceipt, SaleRecord
from .goal_rules import HUNDRED, safe_percentage
from .period_calculations import DateLike, is_finished, to_calendar_date
from .sales_aggregation import aggregate_sales

logger = logging.getLogger(__name__)


def aggregate_for_cashier_goal(goal: CashierGoal, sales: Iterable[SaleRecord], receipts: Iterable[PaymentReceipt],
                               closed_statuses: Optional[Iterable[str]] = None) -> AggregateResult:
    """Whole-store aggregate for the goal window, never filtered to the cashier"""
    return aggregate_sales(sales, receipts, goal.window, [goal.store_id], None, closed_statuses)


def evaluate_cashier_goal(goal: CashierGoal, aggregate: AggregateResult,
                          today: Optional[DateLike] = None) -> CashierGoalProgress:
    """
    Evaluate a cashier goal against its store aggregate

    Args:
        goal: cashier goal
        aggregate: whole-store aggregate for the goal window
        today: reference day for is_finished (None = not finished)

    Returns:
        CashierGoalProgress; an empty method set yields zero method sales
    """
    if not goal.payment_methods:
        logger.warning(f"⚠️ Cashier goal {goal.id} has no payment methods - method sales are zero")

    target_method_sales = aggregate.method_total(goal.payment_methods)
    total_store_sales = aggregate.total_value
    percentage_achieved = safe_percentage(target_method_sales, total_store_sales)
    is_goal_met = percentage_achieved >= goal.target_percentage
    bonus_percentage = goal.bonus_percentage_achieved if is_goal_met else goal.bonus_percentage_not_achieved

    return CashierGoalProgress(
        goal_id=goal.id,
        cashier_id=goal.cashier_id,
        store_id=goal.store_id,
        period_type=goal.period_type,
        week_start=goal.week_start,
        week_end=goal.week_end,
        payment_methods=tuple(sorted(goal.payment_methods, key=lambda m: m.value)),
        target_percentage=goal.target_percentage,
        total_store_sales=total_store_sales,
        target_method_sales=target_method_sales,
        percentage_achieved=percentage_achieved,
        is_goal_met=is_goal_met,
        bonus_percentage=bonus_percentage,
        bonus_value=round_currency(target_method_sales * bonus_percentage / HUNDRED),
        is_finished=False if today is None else is_finished(goal.week_end, today),
    )


def select_current_cashier_goal(goals: Iterable[CashierGoal], cashier_id: str,
                                today: DateLike) -> Optional[CashierGoal]:
    """The cashier's active goal whose window contains today (latest start wins)"""
    day = to_calendar_date(today)
    candidates: List[CashierGoal] = [
        goal for goal in goals
        if goal.is_active and goal.cashier_id == cashier_id and goal.window.contains(day)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda goal: (goal.week_start, goal.id))
