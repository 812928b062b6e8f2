"""
Financial mathematics utility functions.

Provides the annuity formulas, payment-period helpers and calendar
arithmetic used by the amortization engine.

All functions are pure (no side effects) and reusable.

Key concepts:
- Rate format: Annual rate as a PERCENTAGE Decimal (5.5 = 5.5%)
- Periodic rate: (annual_rate / 100) / periods_per_year
- Payment periodicity: MONTHLY (12), QUARTERLY (4), SEMI_ANNUALLY (2), ANNUALLY (1)
"""
import math
from decimal import Decimal
from typing import Tuple

from fincore.app.schemas.loans import PaymentPeriodicity
from fincore.app.utils.decimal_utils import ZERO, ONE, HUNDRED, to_decimal

MONTHS_PER_YEAR = 12


# ============================================================================
# PERIODICITY
# ============================================================================

def get_periods_per_year(periodicity: PaymentPeriodicity) -> int:
    """
    Get the number of payment periods per year for a given periodicity.

    Args:
        periodicity: Payment periodicity

    Returns:
        Number of payment periods per year
    """
    if periodicity == PaymentPeriodicity.MONTHLY:
        return 12
    elif periodicity == PaymentPeriodicity.QUARTERLY:
        return 4
    elif periodicity == PaymentPeriodicity.SEMI_ANNUALLY:
        return 2
    elif periodicity == PaymentPeriodicity.ANNUALLY:
        return 1
    else:
        raise ValueError(f"Unsupported payment periodicity: {periodicity}")


def get_months_per_period(periods_per_year: int) -> int:
    """
    Number of calendar months covered by one payment period.

    Raises:
        ValueError: If periods_per_year does not divide 12 (1, 2, 3, 4, 6, 12)
    """
    if periods_per_year <= 0 or MONTHS_PER_YEAR % periods_per_year != 0:
        raise ValueError(
            f"periods_per_year must divide 12 (1, 2, 3, 4, 6 or 12), got {periods_per_year}"
            )
    return MONTHS_PER_YEAR // periods_per_year


def years_to_total_periods(years: int, periods_per_year: int) -> int:
    """Convert a loan term in years to a number of payment periods."""
    return years * periods_per_year


def months_to_total_periods(months: int, periods_per_year: int) -> int:
    """
    Convert a loan term in months to a number of payment periods.

    A partial trailing period counts as a full one:
    14 months paid quarterly -> 5 periods.
    """
    return math.ceil(months / get_months_per_period(periods_per_year))


# ============================================================================
# ANNUITY
# ============================================================================

def calculate_periodic_rate(annual_rate_percent: Decimal, periods_per_year: int) -> Decimal:
    """
    Convert an annual percentage rate to the rate applied per payment period.

    Example:
        >>> calculate_periodic_rate(Decimal("6"), 12)
        Decimal("0.005")
    """
    return (to_decimal(annual_rate_percent) / HUNDRED) / Decimal(periods_per_year)


def calculate_annuity_payment(
    principal: Decimal,
    annual_rate_percent: Decimal,
    total_periods: int,
    periods_per_year: int
    ) -> Decimal:
    """
    Calculate the fixed periodic payment of an annuity loan.

    Formula: PMT = P * (r * (1 + r)^n) / ((1 + r)^n - 1)

    Where:
        - P: Principal
        - r: Periodic rate ((annual_rate / 100) / periods_per_year)
        - n: Total number of periods

    The formula is undefined at r = 0 (0 / 0), so a zero rate is branched
    explicitly to P / n.

    Args:
        principal: Loan amount
        annual_rate_percent: Annual interest rate as percentage (5.5 for 5.5%)
        total_periods: Total number of payment periods
        periods_per_year: Payment periods per year (12 monthly, 4 quarterly, ...)

    Returns:
        Periodic payment; Decimal("0") when principal <= 0 or total_periods <= 0

    Example:
        >>> calculate_annuity_payment(Decimal("1200000"), Decimal("0"), 12, 12)
        Decimal("100000")
    """
    principal = to_decimal(principal)
    if principal <= 0 or total_periods <= 0:
        return ZERO

    periodic_rate = calculate_periodic_rate(annual_rate_percent, periods_per_year)

    if periodic_rate == 0:
        return principal / Decimal(total_periods)

    compound_factor = (ONE + periodic_rate) ** total_periods
    return principal * (periodic_rate * compound_factor) / (compound_factor - ONE)


# ============================================================================
# CALENDAR POSITION
# ============================================================================

def calculate_calendar_position(period_number: int, periods_per_year: int) -> Tuple[int, int]:
    """
    Year and month (1-based) in which a payment period ends.

    Formula:
        months = period_number * (12 / periods_per_year)
        year   = ceil(months / 12)
        month  = ((months - 1) mod 12) + 1

    Example:
        >>> calculate_calendar_position(13, 12)
        (2, 1)
        >>> calculate_calendar_position(3, 4)   # third quarter ends in September
        (1, 9)
    """
    total_months = period_number * get_months_per_period(periods_per_year)
    year = math.ceil(total_months / MONTHS_PER_YEAR)
    month = ((total_months - 1) % MONTHS_PER_YEAR) + 1
    return year, month
