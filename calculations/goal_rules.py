"""
Goal Rules Module
Percentage and achievement rules shared by the sales and cashier evaluators
"""

from decimal import Decimal

from .entities import ZERO

HUNDRED = Decimal("100")


def safe_percentage(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, or 0 when whole is not positive"""
    if whole <= ZERO:
        return ZERO
    return part / whole * HUNDRED


def is_target_met(current_value: Decimal, target_value: Decimal) -> bool:
    """
    Achievement rule for sales goals

    A zero target is always met (its percentage still displays as 0).
    Changing how unconfigured targets are treated only touches this function.
    """
    if target_value <= ZERO:
        return True
    return current_value >= target_value
