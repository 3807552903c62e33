#!/usr/bin/env python3
"""
Tests for cashier payment-method goals
"""

from datetime import date
from decimal import Decimal

from calculations.cashier_goal_evaluation import (
    aggregate_for_cashier_goal, evaluate_cashier_goal, select_current_cashier_goal,
)
from calculations.entities import (
    AggregateResult, CashierGoal, GoalPeriod, PaymentMethod, PaymentReceipt, SaleRecord,
)


def make_goal(goal_id="c1", methods=(PaymentMethod.PIX, PaymentMethod.DEBITO), target="25",
              achieved="1", not_achieved="0.5", start=date(2024, 5, 13), end=date(2024, 5, 19),
              cashier="u9", active=True):
    return CashierGoal(
        id=goal_id, cashier_id=cashier, store_id="saron1", period_type=GoalPeriod.WEEKLY,
        week_start=start, week_end=end, payment_methods=frozenset(methods),
        target_percentage=Decimal(target), bonus_percentage_achieved=Decimal(achieved),
        bonus_percentage_not_achieved=Decimal(not_achieved), is_active=active,
    )


def store_aggregate():
    return AggregateResult(
        total_value=Decimal("1000"),
        count=3,
        by_payment_method={
            PaymentMethod.PIX: Decimal("200"),
            PaymentMethod.DEBITO: Decimal("100"),
            PaymentMethod.CREDITO: Decimal("700"),
        },
    )


def test_goal_met_uses_achieved_rate():
    progress = evaluate_cashier_goal(make_goal(), store_aggregate())

    assert progress.target_method_sales == Decimal("300")
    assert progress.total_store_sales == Decimal("1000")
    assert progress.percentage_achieved == Decimal("30")
    assert progress.is_goal_met is True
    assert progress.bonus_percentage == Decimal("1")
    assert progress.bonus_value == Decimal("3.00")


def test_goal_missed_uses_not_achieved_rate():
    progress = evaluate_cashier_goal(make_goal(target="40"), store_aggregate())

    assert progress.is_goal_met is False
    assert progress.bonus_percentage == Decimal("0.5")
    assert progress.bonus_value == Decimal("1.50")


def test_boundary_percentage_meets_goal():
    assert evaluate_cashier_goal(make_goal(target="30"), store_aggregate()).is_goal_met is True


def test_no_store_sales_gives_zero_percentage():
    progress = evaluate_cashier_goal(make_goal(), AggregateResult())

    assert progress.percentage_achieved == Decimal("0")
    assert progress.is_goal_met is False
    assert progress.bonus_value == Decimal("0.00")


def test_empty_method_set_gives_zero_progress():
    progress = evaluate_cashier_goal(make_goal(methods=()), store_aggregate())

    assert progress.target_method_sales == Decimal("0")
    assert progress.percentage_achieved == Decimal("0")
    assert progress.is_goal_met is False


def test_denominator_is_whole_store_not_cashier():
    sales = [
        SaleRecord("s1", "saron1", date(2024, 5, 14), Decimal("600"), "Ana Souza", "Finalizado"),
        SaleRecord("s2", "saron1", date(2024, 5, 15), Decimal("400"), "Bruno Lima", "Finalizado"),
        SaleRecord("s3", "saron2", date(2024, 5, 15), Decimal("999"), "Carla Dias", "Finalizado"),
    ]
    receipts = [
        PaymentReceipt("s1", PaymentMethod.PIX, Decimal("600"), Decimal("600")),
        PaymentReceipt("s2", PaymentMethod.CREDITO, Decimal("400"), Decimal("400")),
        PaymentReceipt("s3", PaymentMethod.PIX, Decimal("999"), Decimal("999")),
    ]
    goal = make_goal(target="50")

    progress = evaluate_cashier_goal(goal, aggregate_for_cashier_goal(goal, sales, receipts), date(2024, 5, 16))

    assert progress.total_store_sales == Decimal("1000")
    assert progress.target_method_sales == Decimal("600")
    assert progress.percentage_achieved == Decimal("60")
    assert progress.is_goal_met is True
    assert progress.is_finished is False
    assert progress.bonus_value == Decimal("6.00")


def test_finished_flag_follows_reference_day():
    assert evaluate_cashier_goal(make_goal(), store_aggregate(), date(2024, 5, 20)).is_finished is True
    assert evaluate_cashier_goal(make_goal(), store_aggregate()).is_finished is False


def test_select_current_cashier_goal():
    goals = [
        make_goal("old"),
        make_goal("now", start=date(2024, 5, 20), end=date(2024, 5, 26)),
        make_goal("other", start=date(2024, 5, 20), end=date(2024, 5, 26), cashier="u8"),
        make_goal("off", start=date(2024, 5, 20), end=date(2024, 5, 26), active=False),
    ]

    assert select_current_cashier_goal(goals, "u9", date(2024, 5, 22)).id == "now"
    assert select_current_cashier_goal(goals, "u9", date(2024, 6, 10)) is None
