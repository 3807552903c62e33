"""
Retail Incentive Calculations Module

This module contains all calculation functions for the goal and bonus engine.
Each calculation step is organized in a separate file: periods, sales aggregation,
sales / cashier goal evaluation, bonus, pacing, dashboards and payment summary.
"""

from .bonus_calculations import calculate_bonus, calculate_manager_team_bonus, resolve_bonus_rates
from .cashier_goal_evaluation import evaluate_cashier_goal
from .currency import format_currency, parse_currency, round_currency
from .dashboards import compose_cashier_dashboard, compose_goal_dashboard, compose_personal_goals
from .pacing_calculations import calculate_expected_progress, evaluate_pacing
from .payment_summary import compose_bonus_summary, compose_payment_summary
from .period_calculations import InvalidPeriodError, is_finished, is_within_window, resolve_window
from .sales_aggregation import aggregate_sales
from .sales_goal_evaluation import evaluate_sales_goal

__all__ = [
    'InvalidPeriodError',
    'aggregate_sales',
    'calculate_bonus',
    'calculate_expected_progress',
    'calculate_manager_team_bonus',
    'compose_bonus_summary',
    'compose_cashier_dashboard',
    'compose_goal_dashboard',
    'compose_payment_summary',
    'compose_personal_goals',
    'evaluate_cashier_goal',
    'evaluate_pacing',
    'evaluate_sales_goal',
    'format_currency',
    'is_finished',
    'is_within_window',
    'parse_currency',
    'resolve_bonus_rates',
    'resolve_window',
    'round_currency',
]
