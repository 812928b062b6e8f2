"""
Annuity amortization service.

Generates the repayment schedule of a fixed-rate annuity loan: every period
pays the same amount, split between interest on the outstanding balance and
principal.

The schedule is materialized eagerly and bounded by MAX_SCHEDULE_PERIODS.
"""
from decimal import Decimal
from typing import Dict, List, Optional

from fincore.app.config import get_settings
from fincore.app.logging_config import get_logger
from fincore.app.schemas.loans import AmortizationRow, AnnuitySchedule, LoanTerms, YearlyAmortization
from fincore.app.utils.decimal_utils import ZERO, to_decimal
from fincore.app.utils.financial_math import (
    calculate_annuity_payment,
    calculate_calendar_position,
    calculate_periodic_rate,
    get_months_per_period,
    get_periods_per_year,
    months_to_total_periods,
    )

logger = get_logger(__name__)


class AmortizationError(Exception):
    """Raised when a schedule cannot be generated for the given terms."""
    pass


def generate_amortization_schedule(
    principal: Decimal,
    annual_rate_percent: Decimal,
    total_periods: int,
    periods_per_year: int,
    max_periods: Optional[int] = None
    ) -> AnnuitySchedule:
    """
    Generate a complete amortization schedule for an annuity loan.

    For each period 1..n:
        interest  = remaining_balance * periodic_rate
        principal = payment - interest
        remaining = max(0, remaining - principal)

    The remaining balance never goes below zero.
    total_payments is payment * n, not a sum over the rows.

    Args:
        principal: Loan amount
        annual_rate_percent: Annual interest rate as percentage (5.5 for 5.5%)
        total_periods: Number of payment periods
        periods_per_year: Payment periods per year; must divide 12
        max_periods: Upper bound on total_periods (default: Settings.MAX_SCHEDULE_PERIODS)

    Returns:
        AnnuitySchedule; degenerate input (principal <= 0 or total_periods <= 0)
        gives payment 0, zero totals and an empty schedule

    Raises:
        ValueError: If periods_per_year does not divide 12
        AmortizationError: If total_periods exceeds max_periods

    Example:
        >>> result = generate_amortization_schedule(Decimal("1200000"), Decimal("0"), 12, 12)
        >>> result.payment, result.total_interest
        (Decimal("100000"), Decimal("0"))
    """
    principal = to_decimal(principal)
    annual_rate_percent = to_decimal(annual_rate_percent)
    get_months_per_period(periods_per_year)  # raises on unsupported periodicity

    if principal <= 0 or total_periods <= 0:
        return AnnuitySchedule(payment=ZERO, total_payments=ZERO, total_interest=ZERO, schedule=[])

    if max_periods is None:
        max_periods = get_settings().MAX_SCHEDULE_PERIODS
    if total_periods > max_periods:
        logger.warning(f"Refusing schedule of {total_periods} periods (limit {max_periods})")
        raise AmortizationError(
            f"Schedule of {total_periods} periods exceeds the limit of {max_periods}"
            )

    payment = calculate_annuity_payment(principal, annual_rate_percent, total_periods, periods_per_year)

    periodic_rate = calculate_periodic_rate(annual_rate_percent, periods_per_year)
    remaining_balance = principal
    total_interest = ZERO
    schedule: List[AmortizationRow] = []

    for period in range(1, total_periods + 1):
        interest_payment = remaining_balance * periodic_rate
        principal_payment = payment - interest_payment
        remaining_balance = max(ZERO, remaining_balance - principal_payment)
        total_interest += interest_payment

        year, month = calculate_calendar_position(period, periods_per_year)
        schedule.append(AmortizationRow(
            period_number=period,
            year=year,
            month=month,
            payment=payment,
            principal_payment=principal_payment,
            interest_payment=interest_payment,
            remaining_balance=remaining_balance,
            ))

    return AnnuitySchedule(
        payment=payment,
        total_payments=payment * Decimal(total_periods),
        total_interest=total_interest,
        schedule=schedule,
        )


def generate_schedule_for_terms(terms: LoanTerms, max_periods: Optional[int] = None) -> AnnuitySchedule:
    """
    Generate the schedule for loan terms entered as principal / rate / months / periodicity.

    A term that is not a whole number of periods is rounded up (14 months
    quarterly -> 5 periods).
    """
    periods_per_year = get_periods_per_year(terms.periodicity)
    total_periods = months_to_total_periods(terms.term_months, periods_per_year)
    return generate_amortization_schedule(
        terms.principal,
        terms.annual_rate,
        total_periods,
        periods_per_year,
        max_periods=max_periods,
        )


def summarize_schedule_by_year(result: AnnuitySchedule) -> List[YearlyAmortization]:
    """
    Roll a schedule up into loan years.

    Returns:
        One entry per loan year, in order, with principal and interest paid in
        that year and the balance after its last period
    """
    years: Dict[int, YearlyAmortization] = {}
    for row in result.schedule:
        current = years.get(row.year)
        if current is None:
            years[row.year] = YearlyAmortization(
                year=row.year,
                principal_paid=row.principal_payment,
                interest_paid=row.interest_payment,
                closing_balance=row.remaining_balance,
                )
        else:
            years[row.year] = YearlyAmortization(
                year=row.year,
                principal_paid=current.principal_paid + row.principal_payment,
                interest_paid=current.interest_paid + row.interest_payment,
                closing_balance=row.remaining_balance,
                )
    return [years[year] for year in sorted(years)]
