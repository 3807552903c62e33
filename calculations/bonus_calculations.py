"""
Bonus Calculations Module
Converts goal progress into bonus amounts and the manager team roll-up

Formula Summary:
- applied_percentage = achieved rate if the goal was achieved, else not-achieved rate
- bonus_value = current_value * applied_percentage / 100 (sales goals, finished only)
- cashier goals carry their own bonus from the cashier evaluator
- manager team bonus = sum over achieved vendor goals of vendor sales * manager achieved rate / 100
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Union

from .currency import round_currency
from .entities import (
    BonusLineItem, BonusRates, BonusResult, CashierGoalProgress, Employee, EmployeeRole,
    GoalProgress, GoalType, ZERO,
)
from .goal_rules import HUNDRED

logger = logging.getLogger(__name__)

ROLLUP_GOAL_TYPES = (GoalType.INDIVIDUAL.value, GoalType.TEAM.value)


def resolve_bonus_rates(employee: Optional[Employee], defaults: Optional[BonusRates] = None) -> BonusRates:
    """Personal rates, falling back to the configured defaults rate by rate"""
    defaults = defaults or BonusRates()
    if employee is None:
        return defaults

    achieved = employee.bonus_percentage_achieved
    not_achieved = employee.bonus_percentage_not_achieved
    return BonusRates(
        achieved=defaults.achieved if achieved is None else achieved,
        not_achieved=defaults.not_achieved if not_achieved is None else not_achieved,
    )


def calculate_bonus(progress: Union[GoalProgress, CashierGoalProgress], rates: Optional[BonusRates] = None,
                    only_finished: bool = True) -> BonusResult:
    """
    Bonus for one goal

    Args:
        progress: sales or cashier goal progress
        rates: achieved / not-achieved percentages (sales goals only)
        only_finished: pay sales goals only once their window has ended

    Returns:
        BonusResult with the applied percentage and the rounded bonus value
    """
    if isinstance(progress, CashierGoalProgress):
        return BonusResult(progress.bonus_percentage, progress.bonus_value)

    rates = rates or BonusRates()
    applied = rates.achieved if progress.achieved else rates.not_achieved

    if only_finished and not progress.is_finished:
        return BonusResult(applied, ZERO)

    return BonusResult(applied, round_currency(progress.current_value * applied / HUNDRED))


def team_rollup_sources(manager_item: BonusLineItem, line_items: Iterable[BonusLineItem]) -> List[BonusLineItem]:
    """
    Vendor results a manager's team bonus is computed from

    Achieved vendor goals (individual or team) in the manager's store and
    window, one entry per goal, leaving out goals the manager is credited on.
    """
    items = list(line_items)
    manager_goal_ids = {item.goal_id for item in items if item.employee_id == manager_item.employee_id}

    sources: List[BonusLineItem] = []
    seen_goals = set()
    for item in items:
        if (item.role is EmployeeRole.VENDOR
                and item.achieved
                and item.goal_type in ROLLUP_GOAL_TYPES
                and item.store_id == manager_item.store_id
                and item.week_start == manager_item.week_start
                and item.week_end == manager_item.week_end
                and item.goal_id not in manager_goal_ids
                and item.goal_id not in seen_goals):
            seen_goals.add(item.goal_id)
            sources.append(item)
    return sources


def calculate_manager_team_bonus(manager: Employee, sales_values: Iterable[Decimal]) -> Decimal:
    """Manager's own achieved rate applied to each subordinate result; 0 without a personal rate"""
    rate = manager.bonus_percentage_achieved
    if rate is None:
        logger.debug(f"Manager {manager.full_name} has no achieved rate - team bonus is zero")
        return ZERO
    return sum((round_currency(value * rate / HUNDRED) for value in sales_values), ZERO)
