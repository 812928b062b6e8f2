"""
Test financial math utilities.
All test is independent of the others, so help use pytest features.
"""
from decimal import Decimal

import pytest

from fincore.app.schemas.loans import PaymentPeriodicity
from fincore.app.utils.financial_math import (
    calculate_annuity_payment,
    calculate_calendar_position,
    calculate_periodic_rate,
    get_months_per_period,
    get_periods_per_year,
    months_to_total_periods,
    years_to_total_periods,
    )

TOLERANCE = Decimal("0.01")


# ============================================================================
# TESTS: Periodicity
# ============================================================================

@pytest.mark.parametrize("periodicity, expected", [
    (PaymentPeriodicity.MONTHLY, 12),
    (PaymentPeriodicity.QUARTERLY, 4),
    (PaymentPeriodicity.SEMI_ANNUALLY, 2),
    (PaymentPeriodicity.ANNUALLY, 1),
    ])
def test_get_periods_per_year(periodicity, expected):
    assert get_periods_per_year(periodicity) == expected


@pytest.mark.parametrize("ppy, months", [(12, 1), (6, 2), (4, 3), (3, 4), (2, 6), (1, 12)])
def test_get_months_per_period(ppy, months):
    assert get_months_per_period(ppy) == months


@pytest.mark.parametrize("ppy", [0, 5, 7, 24, -12])
def test_get_months_per_period_rejects_non_divisors(ppy):
    """Periods per year that don't divide 12 have no calendar mapping."""
    with pytest.raises(ValueError, match="must divide 12"):
        get_months_per_period(ppy)


def test_term_conversions():
    """Years multiply, months round a partial trailing period up."""
    assert years_to_total_periods(30, 12) == 360
    assert months_to_total_periods(360, 12) == 360
    assert months_to_total_periods(14, 4) == 5
    assert months_to_total_periods(12, 1) == 1


# ============================================================================
# TESTS: Annuity payment
# ============================================================================

def test_periodic_rate():
    assert calculate_periodic_rate(Decimal("6"), 12) == Decimal("0.005")


def test_annuity_payment_reference_mortgage():
    """100,000 at 6% over 30 years monthly: the textbook 599.55."""
    payment = calculate_annuity_payment(Decimal("100000"), Decimal("6"), 360, 12)

    assert abs(payment - Decimal("599.55")) < TOLERANCE


def test_annuity_payment_zero_rate_is_linear():
    """At r = 0 the formula is 0/0; payment must be P / n."""
    payment = calculate_annuity_payment(Decimal("1200000"), Decimal("0"), 12, 12)

    assert payment == Decimal("100000")


@pytest.mark.parametrize("principal, periods", [
    (Decimal("0"), 12),
    (Decimal("-100"), 12),
    (Decimal("1000"), 0),
    (Decimal("1000"), -1),
    ])
def test_annuity_payment_degenerate_input(principal, periods):
    assert calculate_annuity_payment(principal, Decimal("5"), periods, 12) == Decimal("0")


def test_annuity_payment_single_period():
    """One period: principal plus one period of interest."""
    payment = calculate_annuity_payment(Decimal("1000"), Decimal("12"), 1, 12)

    assert payment == Decimal("1010")


# ============================================================================
# TESTS: Calendar position
# ============================================================================

@pytest.mark.parametrize("period, ppy, expected", [
    (1, 12, (1, 1)),
    (12, 12, (1, 12)),
    (13, 12, (2, 1)),
    (1, 4, (1, 3)),
    (3, 4, (1, 9)),
    (5, 4, (2, 3)),
    (1, 2, (1, 6)),
    (2, 1, (2, 12)),
    ])
def test_calendar_position(period, ppy, expected):
    assert calculate_calendar_position(period, ppy) == expected
