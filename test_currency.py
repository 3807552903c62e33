#!/usr/bin/env python3
"""
Tests for Brazilian currency parsing, formatting and payout rounding
"""

from decimal import Decimal

import pytest

from calculations.currency import format_currency, parse_currency, round_currency


@pytest.mark.parametrize("raw, expected", [
    ("1.234,56", Decimal("1234.56")),
    ("R$ 1.234,56", Decimal("1234.56")),
    ("1234,5", Decimal("1234.5")),
    ("1234.56", Decimal("1234.56")),
    ("1.234", Decimal("1234")),
    ("-12.500", Decimal("-12500")),
    ("1.234.567", Decimal("1234567")),
    ("12.5", Decimal("12.5")),
    ("1234.567", Decimal("1234.567")),
    ("  89,90 ", Decimal("89.90")),
    (1234.5, Decimal("1234.5")),
    (250, Decimal("250")),
    (Decimal("10.10"), Decimal("10.10")),
])
def test_parse_currency_formats(raw, expected):
    assert parse_currency(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", None, "-", ",", float("nan"), float("inf"), True, [1, 2]])
def test_parse_currency_degrades_to_zero(raw):
    assert parse_currency(raw) == Decimal("0")


def test_parse_currency_is_idempotent():
    once = parse_currency("1.234,56")
    assert parse_currency(once) == once
    assert parse_currency(str(once)) == once


def test_format_currency_uses_brazilian_separators():
    assert format_currency(Decimal("1234567.89")) == "1.234.567,89"
    assert format_currency(0) == "0,00"
    assert format_currency("12,3") == "12,30"


@pytest.mark.parametrize("value", ["0.01", "1234.56", "1000000.00", "42.10"])
def test_format_then_parse_returns_original(value):
    amount = Decimal(value)
    assert parse_currency(format_currency(amount)) == amount


@pytest.mark.parametrize("value, expected", [
    (Decimal("1.005"), Decimal("1.00")),
    (Decimal("1.0051"), Decimal("1.01")),
    (Decimal("2.675"), Decimal("2.67")),
    (Decimal("2.676"), Decimal("2.68")),
    (Decimal("7.004"), Decimal("7.00")),
    (Decimal("3"), Decimal("3.00")),
])
def test_round_currency_rounds_exact_half_down(value, expected):
    assert round_currency(value) == expected
