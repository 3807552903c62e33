"""
Dashboard Composition Module
Role-specific views over running goals and the personal goal history

- Vendors: their current weekly individual goals (store team goals when they have none)
- Managers: weekly and monthly progress aggregated over the stores they run
- Admin / finance: weekly and monthly progress over every store or one requested store
- Cashiers: the current cashier goal with pacing and per-method totals
"""

import logging
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from .bonus_calculations import calculate_bonus, resolve_bonus_rates
from .cashier_goal_evaluation import (
    aggregate_for_cashier_goal, evaluate_cashier_goal, select_current_cashier_goal,
)
from .entities import (
    BonusRates, CashierDashboard, CashierGoal, DashboardGoal, Employee, EmployeeRole, GoalDashboard,
    GoalPeriod, GoalProgress, GoalType, PaymentReceipt, PeriodWindow, PersonalGoalEntry,
    PersonalGoalsReport, SaleRecord, SalesGoal, SALES_ROLES, ZERO,
)
from .pacing_calculations import cashier_pacing, evaluate_pacing
from .period_calculations import DateLike, is_finished, resolve_window, to_calendar_date, windows_overlap
from .sales_goal_evaluation import (
    aggregate_for_sales_goal, aggregate_goal_progress, evaluate_sales_goal, select_current_goals,
)

logger = logging.getLogger(__name__)

ALL_STORES_LABEL = "all"


def _employee_index(employees: Iterable[Employee]) -> Dict[str, Employee]:
    return {employee.id: employee for employee in employees}


def _goal_progress(goal: SalesGoal, employees_by_id: Dict[str, Employee], sales: Sequence[SaleRecord],
                   receipts: Sequence[PaymentReceipt], today: date,
                   closed_statuses: Optional[Iterable[str]] = None) -> GoalProgress:
    seller = employees_by_id.get(goal.seller_id) if goal.seller_id else None
    aggregate = aggregate_for_sales_goal(goal, sales, receipts, seller.full_name if seller else None,
                                         closed_statuses)
    return evaluate_sales_goal(goal, aggregate, today)


def _vendor_goals(viewer: Employee, employees_by_id: Dict[str, Employee], sales_goals: Sequence[SalesGoal],
                  sales: Sequence[SaleRecord], receipts: Sequence[PaymentReceipt], today: date,
                  default_rates: Optional[BonusRates], daily_totals, closed_statuses) -> List[DashboardGoal]:
    current = select_current_goals(sales_goals, today)
    goals = [g for g in current if g.type is GoalType.INDIVIDUAL and g.seller_id == viewer.id]
    if not goals:
        goals = [g for g in current if g.type is GoalType.TEAM and viewer.works_in(g.store_id)]

    rates = resolve_bonus_rates(viewer, default_rates)
    dashboard_goals = []
    for goal in goals:
        progress = _goal_progress(goal, employees_by_id, sales, receipts, today, closed_statuses)
        seller = employees_by_id.get(goal.seller_id) if goal.seller_id else None
        dashboard_goals.append(DashboardGoal(
            progress=progress,
            seller_name=seller.full_name if seller else None,
            pacing=evaluate_pacing(progress.percentage, goal.window, today, daily_totals),
            bonus_percentage_achieved=rates.achieved,
            bonus_percentage_not_achieved=rates.not_achieved,
            estimated_bonus=calculate_bonus(progress, rates, only_finished=False).bonus_value,
        ))
    return dashboard_goals


def compose_goal_dashboard(viewer: Employee, employees: Iterable[Employee], sales_goals: Iterable[SalesGoal],
                           sales: Iterable[SaleRecord], receipts: Iterable[PaymentReceipt], today: DateLike,
                           store_id: Optional[str] = None, default_rates: Optional[BonusRates] = None,
                           daily_totals: Optional[Dict[date, Decimal]] = None,
                           closed_statuses: Optional[Iterable[str]] = None) -> GoalDashboard:
    """
    Current goals as seen by one employee

    Args:
        viewer: employee opening the dashboard
        employees: employee directory (resolves goal sellers)
        sales_goals: every configured sales goal
        sales, receipts: snapshot covering the running windows
        today: business-local calendar day
        store_id: store filter for admin / finance viewers (None = every store)
        default_rates: fallback bonus rates
        daily_totals: sales history for pattern-based pacing

    Returns:
        GoalDashboard with per-goal rows (vendors) or aggregated rows (everyone else)
    """
    day = to_calendar_date(today)
    employees_by_id = _employee_index(employees)
    sales, receipts, sales_goals = list(sales), list(receipts), list(sales_goals)

    if viewer.role is EmployeeRole.VENDOR:
        goals = _vendor_goals(viewer, employees_by_id, sales_goals, sales, receipts, day,
                              default_rates, daily_totals, closed_statuses)
        logger.info(f"📊 Vendor dashboard for {viewer.full_name}: {len(goals)} goals")
        return GoalDashboard(viewer_role=viewer.role, goals=tuple(goals))

    if viewer.role is EmployeeRole.MANAGER:
        stores = set(viewer.all_store_ids)
        store_label = viewer.all_store_ids[0] if len(stores) == 1 else "manager_stores"
    elif store_id:
        stores = {store_id}
        store_label = store_id
    else:
        stores = None
        store_label = ALL_STORES_LABEL

    aggregated = []
    for period in (GoalPeriod.WEEKLY, GoalPeriod.MONTHLY):
        goals = [
            g for g in select_current_goals(sales_goals, day, periods=(period,))
            if stores is None or g.store_id in stores
        ]
        progresses = [_goal_progress(g, employees_by_id, sales, receipts, day, closed_statuses) for g in goals]
        summary = aggregate_goal_progress(progresses, period, store_label)
        if summary is None:
            continue
        window = PeriodWindow(summary.week_start, summary.week_end)
        pacing = evaluate_pacing(summary.percentage, window, day, daily_totals)
        aggregated.append(replace(summary, pacing=pacing))

    logger.info(f"📊 Aggregated dashboard for {viewer.full_name} ({viewer.role.value}): {len(aggregated)} rows")
    return GoalDashboard(viewer_role=viewer.role, aggregated=tuple(aggregated))


def compose_cashier_dashboard(cashier: Employee, cashier_goals: Iterable[CashierGoal],
                              sales: Iterable[SaleRecord], receipts: Iterable[PaymentReceipt], today: DateLike,
                              closed_statuses: Optional[Iterable[str]] = None) -> CashierDashboard:
    """Current cashier goal with progress, pacing and store totals per payment method"""
    day = to_calendar_date(today)
    weekly = [g for g in cashier_goals if g.period_type is GoalPeriod.WEEKLY]
    goal = select_current_cashier_goal(weekly, cashier.id, day)

    if goal is None:
        return CashierDashboard(has_goal=False, window=resolve_window(GoalPeriod.WEEKLY, day))

    aggregate = aggregate_for_cashier_goal(goal, sales, receipts, closed_statuses)
    progress = evaluate_cashier_goal(goal, aggregate, day)
    return CashierDashboard(
        has_goal=True,
        window=goal.window,
        progress=progress,
        pacing=cashier_pacing(progress, day),
        sales_by_method=dict(aggregate.by_payment_method),
    )


def compose_personal_goals(employee: Employee, employees: Iterable[Employee], sales_goals: Iterable[SalesGoal],
                           cashier_goals: Iterable[CashierGoal], sales: Iterable[SaleRecord],
                           receipts: Iterable[PaymentReceipt], today: DateLike, weeks: int = 4,
                           default_rates: Optional[BonusRates] = None,
                           closed_statuses: Optional[Iterable[str]] = None) -> PersonalGoalsReport:
    """
    Recent goals of one employee with progress and bonus

    Goals whose window ends within the last `weeks` weeks or is still running
    are listed newest first. Summary counts only finished goals for
    achievements and bonus.
    """
    day = to_calendar_date(today)
    recent = PeriodWindow(day - timedelta(weeks=weeks), day)
    sales, receipts = list(sales), list(receipts)
    employees_by_id = _employee_index(employees)
    employees_by_id.setdefault(employee.id, employee)

    def in_range(goal) -> bool:
        return goal.is_active and windows_overlap(goal.window, recent)

    entries: List[PersonalGoalEntry] = []

    if employee.role in SALES_ROLES:
        rates = resolve_bonus_rates(employee, default_rates)
        for goal in sales_goals:
            if not in_range(goal):
                continue
            own_goal = goal.type is GoalType.INDIVIDUAL and goal.seller_id == employee.id
            team_goal = goal.type is GoalType.TEAM and employee.works_in(goal.store_id)
            if not (own_goal or team_goal):
                continue
            progress = _goal_progress(goal, employees_by_id, sales, receipts, day, closed_statuses)
            bonus = calculate_bonus(progress, rates)
            entries.append(PersonalGoalEntry(
                goal_id=goal.id,
                period=goal.period,
                store_id=goal.store_id,
                week_start=goal.week_start,
                week_end=goal.week_end,
                target_value=progress.target_value,
                current_value=progress.current_value,
                percentage=progress.percentage,
                achieved=progress.achieved,
                is_finished=progress.is_finished,
                applied_bonus_percentage=bonus.applied_percentage,
                bonus_value=bonus.bonus_value,
                is_team_goal=team_goal,
            ))

    elif employee.role is EmployeeRole.CASHIER:
        for goal in cashier_goals:
            if not in_range(goal) or goal.cashier_id != employee.id:
                continue
            progress = evaluate_cashier_goal(goal, aggregate_for_cashier_goal(goal, sales, receipts,
                                                                              closed_statuses), day)
            entries.append(PersonalGoalEntry(
                goal_id=goal.id,
                period=goal.period_type,
                store_id=goal.store_id,
                week_start=goal.week_start,
                week_end=goal.week_end,
                target_value=goal.target_percentage,
                current_value=progress.target_method_sales,
                percentage=progress.percentage_achieved,
                achieved=progress.is_goal_met,
                is_finished=is_finished(goal.week_end, day),
                applied_bonus_percentage=progress.bonus_percentage,
                bonus_value=progress.bonus_value,
                is_cashier_goal=True,
                cashier_progress=progress,
            ))

    entries.sort(key=lambda entry: (entry.week_start, entry.goal_id), reverse=True)
    finished = [entry for entry in entries if entry.is_finished]

    return PersonalGoalsReport(
        employee=employee,
        goals=tuple(entries),
        total_goals=len(entries),
        achieved_goals=sum(1 for entry in finished if entry.achieved),
        total_bonus=sum((entry.bonus_value for entry in finished), ZERO),
        total_sales=sum((entry.current_value for entry in entries), ZERO),
    )
