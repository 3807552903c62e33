"""
Incentive calculation service
Turns validated request snapshots into engine calls and JSON-ready results
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from app.config import settings
from app.models.incentive_models import (
    BonusSummaryRequest, CashierDashboardRequest, CashierGoalProgressRequest, EmployeeModel,
    GoalDashboardRequest, GoalProgressRequest, PaymentSummaryRequest, PersonalGoalsRequest,
)
from app.services.payloads import to_payload
from calculations.bonus_calculations import calculate_bonus, resolve_bonus_rates
from calculations.cashier_goal_evaluation import aggregate_for_cashier_goal, evaluate_cashier_goal
from calculations.dashboards import compose_cashier_dashboard, compose_goal_dashboard, compose_personal_goals
from calculations.entities import Employee, GoalPeriod, PeriodWindow
from calculations.pacing_calculations import evaluate_pacing
from calculations.payment_summary import compose_bonus_summary, compose_payment_summary
from calculations.period_calculations import InvalidPeriodError, previous_week_window, resolve_window
from calculations.sales_aggregation import daily_sales_totals
from calculations.sales_goal_evaluation import aggregate_for_sales_goal, evaluate_sales_goal

logger = logging.getLogger(__name__)


class EntityNotFoundError(LookupError):
    """Raised when a request references an employee that is not in its snapshot"""


class IncentiveService:
    """Service for handling goal progress and bonus calculations"""

    def __init__(self):
        self.executor = ThreadPoolExecutor(max_workers=4)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _today(self, value: Optional[date]) -> date:
        return value or settings.business_now().date()

    def _now(self, value: Optional[datetime]) -> datetime:
        """Explicit moments with a UTC offset are read on the business clock; naive ones already are"""
        if value is None:
            return settings.business_now()
        if value.tzinfo is not None:
            return value.astimezone(settings.business_timezone())
        return value

    def _employees(self, models: List[EmployeeModel]) -> List[Employee]:
        return [model.to_entity() for model in models]

    def _find_employee(self, employees: List[Employee], employee_id: str) -> Employee:
        for employee in employees:
            if employee.id == employee_id:
                return employee
        raise EntityNotFoundError(f"Employee {employee_id} not found")

    def _execute_sync(self, operation: str, func: Callable[[], Any], record_count: Callable[[Any], int]) -> Dict[str, Any]:
        """Run one calculation and package it with timing"""
        start_time = time.time()

        try:
            logger.info(f"Executing {operation}")
            result = func()
            execution_time = time.time() - start_time
            logger.info(f"✅ {operation} completed in {execution_time:.3f}s")
            return {
                'data': to_payload(result),
                'execution_time': execution_time,
                'record_count': record_count(result),
                'operation': operation,
            }

        except (EntityNotFoundError, InvalidPeriodError):
            raise
        except Exception as e:
            execution_time = time.time() - start_time
            logger.error(f"Error in {operation}: {e}", exc_info=True)
            raise Exception(f"{operation} failed after {execution_time:.2f}s: {str(e)}")

    async def _execute(self, operation: str, func: Callable[[], Any],
                       record_count: Callable[[Any], int] = lambda result: 1) -> Dict[str, Any]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, self._execute_sync, operation, func, record_count)

    # ------------------------------------------------------------------
    # periods
    # ------------------------------------------------------------------

    async def resolve_period_window(self, period: str, reference_date: Optional[date]) -> Dict[str, Any]:
        """Canonical weekly / monthly window around a reference day"""
        reference = self._today(reference_date)
        return await self._execute(
            "resolve_period_window",
            lambda: {'period': period, 'referenceDate': reference, 'window': resolve_window(period, reference)},
        )

    # ------------------------------------------------------------------
    # sales goals
    # ------------------------------------------------------------------

    async def goal_progress(self, request: GoalProgressRequest) -> Dict[str, Any]:
        """Progress, pacing and bonus of a single sales goal"""
        today = self._today(request.today)

        def run():
            goal = request.goal.to_entity()
            employees = self._employees(request.employees)
            seller = None
            if goal.seller_id:
                seller = next((e for e in employees if e.id == goal.seller_id), None)

            aggregate = aggregate_for_sales_goal(goal, request.sale_entities(), request.receipt_entities(),
                                                 seller.full_name if seller else None,
                                                 settings.CLOSED_SALE_STATUSES)
            progress = evaluate_sales_goal(goal, aggregate, today)
            rates = resolve_bonus_rates(seller, settings.default_bonus_rates())
            return {
                'progress': progress,
                'pacing': evaluate_pacing(progress.percentage, goal.window, today),
                'bonus': calculate_bonus(progress, rates),
                'salesCount': aggregate.count,
            }

        return await self._execute("goal_progress", run)

    async def goal_dashboard(self, request: GoalDashboardRequest) -> Dict[str, Any]:
        today = self._today(request.today)

        def run():
            employees = self._employees(request.employees)
            viewer = self._find_employee(employees, request.viewer_id)
            history = daily_sales_totals([sale.to_entity() for sale in request.history],
                                         closed_statuses=settings.CLOSED_SALE_STATUSES)
            return compose_goal_dashboard(
                viewer, employees, [g.to_entity() for g in request.sales_goals],
                request.sale_entities(), request.receipt_entities(), today,
                store_id=request.store_id,
                default_rates=settings.default_bonus_rates(),
                daily_totals=history,
                closed_statuses=settings.CLOSED_SALE_STATUSES,
            )

        return await self._execute("goal_dashboard", run,
                                   lambda dashboard: len(dashboard.goals) + len(dashboard.aggregated))

    async def personal_goals(self, request: PersonalGoalsRequest) -> Dict[str, Any]:
        today = self._today(request.today)

        def run():
            employees = self._employees(request.employees)
            employee = self._find_employee(employees, request.employee_id)
            return compose_personal_goals(
                employee, employees,
                [g.to_entity() for g in request.sales_goals],
                [g.to_entity() for g in request.cashier_goals],
                request.sale_entities(), request.receipt_entities(), today,
                weeks=request.weeks or settings.PERSONAL_HISTORY_WEEKS,
                default_rates=settings.default_bonus_rates(),
                closed_statuses=settings.CLOSED_SALE_STATUSES,
            )

        return await self._execute("personal_goals", run, lambda report: report.total_goals)

    # ------------------------------------------------------------------
    # cashier goals
    # ------------------------------------------------------------------

    async def cashier_goal_progress(self, request: CashierGoalProgressRequest) -> Dict[str, Any]:
        """Evaluate every cashier goal in the request against the store sales"""
        today = self._today(request.today)

        def run():
            sales, receipts = request.sale_entities(), request.receipt_entities()
            goals = [g.to_entity() for g in request.cashier_goals]
            return {
                'goals': [
                    evaluate_cashier_goal(
                        goal,
                        aggregate_for_cashier_goal(goal, sales, receipts, settings.CLOSED_SALE_STATUSES),
                        today,
                    )
                    for goal in goals
                ]
            }

        return await self._execute("cashier_goal_progress", run, lambda result: len(result['goals']))

    async def cashier_dashboard(self, request: CashierDashboardRequest) -> Dict[str, Any]:
        today = self._today(request.today)

        def run():
            cashier = self._find_employee(self._employees(request.employees), request.cashier_id)
            return compose_cashier_dashboard(
                cashier, [g.to_entity() for g in request.cashier_goals],
                request.sale_entities(), request.receipt_entities(), today,
                closed_statuses=settings.CLOSED_SALE_STATUSES,
            )

        return await self._execute("cashier_dashboard", run, lambda dashboard: 1 if dashboard.has_goal else 0)

    # ------------------------------------------------------------------
    # bonus
    # ------------------------------------------------------------------

    async def bonus_summary(self, request: BonusSummaryRequest) -> Dict[str, Any]:
        """Live bonus totals for the current week and month"""
        now = self._now(request.now)

        def run():
            return compose_bonus_summary(
                now, self._employees(request.employees),
                [g.to_entity() for g in request.sales_goals],
                [g.to_entity() for g in request.cashier_goals],
                request.sale_entities(), request.receipt_entities(),
                store_ids=request.store_ids,
                default_rates=settings.default_bonus_rates(),
                closed_statuses=settings.CLOSED_SALE_STATUSES,
            )

        return await self._execute("bonus_summary", run, lambda summary: len(summary))

    def _payment_period(self, request: PaymentSummaryRequest,
                        now: datetime) -> Tuple[PeriodWindow, Optional[GoalPeriod]]:
        """Pay period and the goal granularity it pays"""
        if request.period_start is None and request.period_end is None:
            if request.period_type is GoalPeriod.MONTHLY:
                last_month_day = resolve_window(GoalPeriod.MONTHLY, now).start - timedelta(days=1)
                return resolve_window(GoalPeriod.MONTHLY, last_month_day), GoalPeriod.MONTHLY
            return previous_week_window(now), GoalPeriod.WEEKLY

        if request.period_start is None or request.period_end is None:
            raise InvalidPeriodError("periodStart and periodEnd must be given together")
        if request.period_end < request.period_start:
            raise InvalidPeriodError("periodEnd must not be before periodStart")
        return PeriodWindow(request.period_start, request.period_end), request.period_type

    async def payment_summary(self, request: PaymentSummaryRequest) -> Dict[str, Any]:
        """Payout report; defaults to the week (or month) before the reference moment"""
        now = self._now(request.now)
        period, goal_period = self._payment_period(request, now)

        def run():
            return compose_payment_summary(
                period, self._employees(request.employees),
                [g.to_entity() for g in request.sales_goals],
                [g.to_entity() for g in request.cashier_goals],
                request.sale_entities(), request.receipt_entities(), now,
                mode=request.mode,
                store_ids=request.store_ids,
                goal_period=goal_period,
                default_rates=settings.default_bonus_rates(),
                store_names=settings.STORE_NAMES,
                closed_statuses=settings.CLOSED_SALE_STATUSES,
            )

        return await self._execute("payment_summary", run, lambda summary: len(summary.line_items))
