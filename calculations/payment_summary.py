"""
Payment Summary Calculations Module
Builds the consolidated bonus payout report for a pay period

Pipeline per period:
1. Select active goals whose window ends inside the period (finished goals only in 'finished' mode)
2. Individual goals -> one line item for the goal's seller
3. Team goals -> one line item per vendor / manager of the store without an individual goal
4. Cashier goals -> one line item per goal
5. Manager team roll-up over achieved vendor goals of the same store and window
6. Totals by role, by store and grand total
"""

import logging
from dataclasses import replace
from datetime import timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from .bonus_calculations import (
    calculate_bonus, calculate_manager_team_bonus, resolve_bonus_rates, team_rollup_sources,
)
from .cashier_goal_evaluation import aggregate_for_cashier_goal, evaluate_cashier_goal
from .entities import (
    BonusLineItem, BonusRates, CashierGoal, Employee, EmployeeRole, GoalPeriod, GoalProgress, GoalType,
    PaymentReceipt, PaymentSummary, PeriodBonusTotals, PeriodWindow, ReportMode, RoleTotals, SaleRecord,
    SalesGoal, SALES_ROLES, StoreTotals, ZERO,
)
from .period_calculations import (
    DateLike, coerce_period, is_finished, payment_date_for, resolve_window, to_calendar_date,
)
from .sales_goal_evaluation import aggregate_for_sales_goal, evaluate_sales_goal

logger = logging.getLogger(__name__)

CASHIER_GOAL_TYPE = "cashier"
ROLE_ORDER = {EmployeeRole.VENDOR: 0, EmployeeRole.MANAGER: 1, EmployeeRole.CASHIER: 2}


def _decimal_sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _in_scope(goal: Union[SalesGoal, CashierGoal], period: PeriodWindow, store_ids: Optional[set],
              goal_period: Optional[GoalPeriod]) -> bool:
    kind = goal.period if isinstance(goal, SalesGoal) else goal.period_type
    return (goal.is_active
            and period.contains(goal.week_end)
            and (store_ids is None or goal.store_id in store_ids)
            and (goal_period is None or kind is goal_period))


def _sales_line_item(employee: Employee, progress: GoalProgress, rates: BonusRates,
                     only_finished: bool) -> BonusLineItem:
    bonus = calculate_bonus(progress, rates, only_finished=only_finished)
    return BonusLineItem(
        employee_id=employee.id,
        employee_name=employee.full_name,
        role=employee.role,
        store_id=progress.store_id,
        goal_id=progress.goal_id,
        goal_type=progress.goal_type.value,
        week_start=progress.week_start,
        week_end=progress.week_end,
        target_value=progress.target_value,
        actual_value=progress.current_value,
        percentage=progress.percentage,
        achieved=progress.achieved,
        applied_bonus_percentage=bonus.applied_percentage,
        own_bonus_value=bonus.bonus_value,
        bonus_value=bonus.bonus_value,
    )


def build_sales_line_items(goals: List[SalesGoal], employees_by_id: Dict[str, Employee],
                           sales: List[SaleRecord], receipts: List[PaymentReceipt], day,
                           only_finished: bool, default_rates: Optional[BonusRates],
                           closed_statuses: Optional[Iterable[str]]) -> List[BonusLineItem]:
    """Individual goal items first, then team goal items for employees without one"""
    items: List[BonusLineItem] = []

    for goal in (g for g in goals if g.type is GoalType.INDIVIDUAL):
        seller = employees_by_id.get(goal.seller_id) if goal.seller_id else None
        if seller is None or not seller.is_active or seller.role not in SALES_ROLES:
            logger.warning(f"⚠️ Skipping goal {goal.id}: seller {goal.seller_id!r} is not an active vendor/manager")
            continue
        aggregate = aggregate_for_sales_goal(goal, sales, receipts, seller.full_name, closed_statuses)
        progress = evaluate_sales_goal(goal, aggregate, day)
        items.append(_sales_line_item(seller, progress, resolve_bonus_rates(seller, default_rates), only_finished))

    covered = {(item.employee_id, item.store_id, item.week_start, item.week_end) for item in items}
    sales_staff = [e for e in employees_by_id.values() if e.is_active and e.role in SALES_ROLES]

    for goal in (g for g in goals if g.type is GoalType.TEAM):
        members = [
            e for e in sales_staff
            if e.works_in(goal.store_id) and (e.id, goal.store_id, goal.week_start, goal.week_end) not in covered
        ]
        if not members:
            continue
        progress = evaluate_sales_goal(goal, aggregate_for_sales_goal(goal, sales, receipts, None, closed_statuses), day)
        for member in members:
            items.append(_sales_line_item(member, progress, resolve_bonus_rates(member, default_rates), only_finished))

    return items


def apply_manager_rollup(items: List[BonusLineItem], employees_by_id: Dict[str, Employee]) -> List[BonusLineItem]:
    """Add each manager's team bonus to their first line item per store and window"""
    rolled: List[BonusLineItem] = []
    credited = set()
    for item in items:
        key = (item.employee_id, item.store_id, item.week_start, item.week_end)
        if item.role is not EmployeeRole.MANAGER or key in credited:
            rolled.append(item)
            continue
        credited.add(key)
        sources = team_rollup_sources(item, items)
        team_bonus = calculate_manager_team_bonus(employees_by_id[item.employee_id],
                                                  [source.actual_value for source in sources])
        if sources:
            logger.info(f"👥 Manager {item.employee_name}: team bonus {team_bonus} from {len(sources)} goals")
        rolled.append(replace(item, manager_team_bonus=team_bonus, bonus_value=item.own_bonus_value + team_bonus))
    return rolled


def build_cashier_line_items(goals: List[CashierGoal], employees_by_id: Dict[str, Employee],
                             sales: List[SaleRecord], receipts: List[PaymentReceipt], day,
                             closed_statuses: Optional[Iterable[str]]) -> List[BonusLineItem]:
    items: List[BonusLineItem] = []
    for goal in goals:
        cashier = employees_by_id.get(goal.cashier_id)
        if cashier is None or not cashier.is_active:
            logger.warning(f"⚠️ Skipping cashier goal {goal.id}: cashier {goal.cashier_id!r} not found or inactive")
            continue
        progress = evaluate_cashier_goal(goal, aggregate_for_cashier_goal(goal, sales, receipts, closed_statuses), day)
        bonus = calculate_bonus(progress)
        items.append(BonusLineItem(
            employee_id=cashier.id,
            employee_name=cashier.full_name,
            role=EmployeeRole.CASHIER,
            store_id=goal.store_id,
            goal_id=goal.id,
            goal_type=CASHIER_GOAL_TYPE,
            week_start=goal.week_start,
            week_end=goal.week_end,
            target_value=goal.target_percentage,
            actual_value=progress.target_method_sales,
            percentage=progress.percentage_achieved,
            achieved=progress.is_goal_met,
            applied_bonus_percentage=bonus.applied_percentage,
            own_bonus_value=bonus.bonus_value,
            bonus_value=bonus.bonus_value,
            payment_methods=progress.payment_methods,
        ))
    return items


def _line_items_frame(items: Iterable[BonusLineItem]) -> pd.DataFrame:
    return pd.DataFrame.from_records(
        [{"role": item.role.value, "store_id": item.store_id, "bonus_value": item.bonus_value} for item in items],
        columns=["role", "store_id", "bonus_value"],
    )


def _role_sums(frame: pd.DataFrame) -> Dict[str, Decimal]:
    if frame.empty:
        return {}
    return {role: _decimal_sum(values) for role, values in frame.groupby("role")["bonus_value"]}


def summarize_line_items(items: Iterable[BonusLineItem], store_names: Optional[Dict[str, str]] = None,
                         store_ids: Optional[Iterable[str]] = None) -> Tuple[RoleTotals, Tuple[StoreTotals, ...]]:
    """
    Totals by role and by store

    Every configured store appears (zeroes included) alongside any store with items;
    a store filter limits the configured stores listed.
    """
    frame = _line_items_frame(items)
    store_names = store_names or {}

    by_role = _role_sums(frame)
    totals = RoleTotals(
        vendor_total=by_role.get(EmployeeRole.VENDOR.value, ZERO),
        manager_total=by_role.get(EmployeeRole.MANAGER.value, ZERO),
        cashier_total=by_role.get(EmployeeRole.CASHIER.value, ZERO),
        grand_total=_decimal_sum(frame["bonus_value"]),
    )

    listed = set(store_names) if store_ids is None else set(store_names) & set(store_ids)
    listed |= set(frame["store_id"])

    store_totals = []
    for store_id in sorted(listed):
        store_roles = _role_sums(frame[frame["store_id"] == store_id])
        vendor = store_roles.get(EmployeeRole.VENDOR.value, ZERO)
        manager = store_roles.get(EmployeeRole.MANAGER.value, ZERO)
        cashier = store_roles.get(EmployeeRole.CASHIER.value, ZERO)
        store_totals.append(StoreTotals(
            store_id=store_id,
            store_name=store_names.get(store_id, store_id),
            vendor_total=vendor,
            manager_total=manager,
            cashier_total=cashier,
            total=vendor + manager + cashier,
        ))

    return totals, tuple(store_totals)


def compose_payment_summary(period: PeriodWindow, employees: Iterable[Employee], sales_goals: Iterable[SalesGoal],
                            cashier_goals: Iterable[CashierGoal], sales: Iterable[SaleRecord],
                            receipts: Iterable[PaymentReceipt], now: DateLike,
                            mode: Union[ReportMode, str] = ReportMode.FINISHED,
                            store_ids: Optional[Iterable[str]] = None,
                            goal_period: Optional[Union[GoalPeriod, str]] = None,
                            default_rates: Optional[BonusRates] = None,
                            store_names: Optional[Dict[str, str]] = None,
                            closed_statuses: Optional[Iterable[str]] = None) -> PaymentSummary:
    """
    Consolidated payout report for a pay period

    Args:
        period: pay period window
        employees: employee directory
        sales_goals, cashier_goals: every configured goal
        sales, receipts: snapshot covering the goal windows
        now: reference moment (finished / current classification)
        mode: 'finished' pays ended sales goals only, 'current' estimates running ones
        store_ids: store filter (None = every store)
        goal_period: restrict to weekly or monthly goals
        default_rates: fallback bonus rates
        store_names: store id -> display name
        closed_statuses: statuses counting as closed

    Returns:
        PaymentSummary with line items, role totals and store totals
    """
    mode = ReportMode(mode)
    day = to_calendar_date(now)
    goal_period = coerce_period(goal_period) if goal_period else None
    store_filter = None if store_ids is None else set(store_ids)
    employees_by_id = {employee.id: employee for employee in employees}
    sales, receipts = list(sales), list(receipts)

    selected_sales_goals = [
        goal for goal in sales_goals
        if _in_scope(goal, period, store_filter, goal_period)
        and (mode is ReportMode.CURRENT or is_finished(goal.week_end, day))
    ]
    selected_cashier_goals = [g for g in cashier_goals if _in_scope(g, period, store_filter, goal_period)]

    logger.info(f"💰 Payment summary {period.start}..{period.end} ({mode.value}): "
                f"{len(selected_sales_goals)} sales goals, {len(selected_cashier_goals)} cashier goals")

    sales_items = build_sales_line_items(selected_sales_goals, employees_by_id, sales, receipts, day,
                                         mode is ReportMode.FINISHED, default_rates, closed_statuses)
    sales_items = apply_manager_rollup(sales_items, employees_by_id)
    cashier_items = build_cashier_line_items(selected_cashier_goals, employees_by_id, sales, receipts, day,
                                             closed_statuses)

    line_items = sorted(
        sales_items + cashier_items,
        key=lambda item: (ROLE_ORDER.get(item.role, 9), item.store_id, item.employee_name.lower(),
                          item.week_start, item.goal_id),
    )
    totals, by_store = summarize_line_items(line_items, store_names, store_filter)

    logger.info(f"✅ Payment summary ready: {len(line_items)} line items, total {totals.grand_total}")
    return PaymentSummary(
        period=period,
        payment_date=payment_date_for(period.end + timedelta(days=7)),
        mode=mode,
        line_items=tuple(line_items),
        totals=totals,
        by_store=by_store,
    )


def compose_bonus_summary(now: DateLike, employees: Iterable[Employee], sales_goals: Iterable[SalesGoal],
                          cashier_goals: Iterable[CashierGoal], sales: Iterable[SaleRecord],
                          receipts: Iterable[PaymentReceipt], store_ids: Optional[Iterable[str]] = None,
                          default_rates: Optional[BonusRates] = None,
                          closed_statuses: Optional[Iterable[str]] = None) -> Dict[str, PeriodBonusTotals]:
    """Live bonus totals for the current week and the current month"""
    employees, sales_goals, cashier_goals = list(employees), list(sales_goals), list(cashier_goals)
    sales, receipts = list(sales), list(receipts)
    store_ids = None if store_ids is None else list(store_ids)

    result = {}
    for period in (GoalPeriod.WEEKLY, GoalPeriod.MONTHLY):
        window = resolve_window(period, now)
        summary = compose_payment_summary(
            window, employees, sales_goals, cashier_goals, sales, receipts, now,
            mode=ReportMode.CURRENT, store_ids=store_ids, goal_period=period,
            default_rates=default_rates, closed_statuses=closed_statuses,
        )
        result[period.value] = PeriodBonusTotals(
            period=window,
            vendor_bonus=summary.totals.vendor_total,
            manager_bonus=summary.totals.manager_total,
            cashier_bonus=summary.totals.cashier_total,
            total=summary.totals.grand_total,
        )
    return result
