"""
Annuity loan schemas.

**Models**:
- PaymentPeriodicity: how often an installment is paid
- LoanTerms: validated loan parameters as entered by the user
- AmortizationRow: one period of a repayment schedule
- AnnuitySchedule: payment figure + totals + the full ordered schedule
- YearlyAmortization: per calendar-year rollup of a schedule
"""
# Postpones evaluation of type hints to improve imports and performance. Also avoid circular import issues.
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fincore.app.utils.decimal_utils import to_decimal
from fincore.app.utils.validation_utils import parse_non_negative


class PaymentPeriodicity(str, Enum):
    """
    Installment frequency of an annuity loan.

    - MONTHLY: 12 payments per year
    - QUARTERLY: 4 payments per year
    - SEMI_ANNUALLY: 2 payments per year
    - ANNUALLY: 1 payment per year
    """
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    SEMI_ANNUALLY = "SEMI_ANNUALLY"
    ANNUALLY = "ANNUALLY"


class LoanTerms(BaseModel):
    """
    Loan parameters as entered by the user.

    Attributes:
        principal: Borrowed amount (0 is accepted and yields an empty schedule)
        annual_rate: Annual interest rate as percentage (5.5 = 5.5%)
        term_months: Loan duration in months
        periodicity: Installment frequency (default MONTHLY)

    Example:
        {"principal": "3000000", "annual_rate": "4.89", "term_months": 360, "periodicity": "MONTHLY"}
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    principal: Decimal
    annual_rate: Decimal
    term_months: int = Field(..., ge=0)
    periodicity: PaymentPeriodicity = PaymentPeriodicity.MONTHLY

    @field_validator("principal", mode="before")
    @classmethod
    def parse_principal(cls, v):
        return to_decimal(v)

    @field_validator("annual_rate", mode="before")
    @classmethod
    def parse_rate(cls, v):
        """Convert rate to Decimal and validate it's non-negative."""
        return parse_non_negative(v, "Interest rate")


class AmortizationRow(BaseModel):
    """
    One payment period of an amortization schedule.

    year/month locate the END of the period on a loan-relative calendar
    (year 1 month 1 is the first month of the loan).
    """
    model_config = ConfigDict(frozen=True)

    period_number: int
    year: int
    month: int
    payment: Decimal
    principal_payment: Decimal
    interest_payment: Decimal
    remaining_balance: Decimal


class AnnuitySchedule(BaseModel):
    """
    Result of an annuity computation.

    Attributes:
        payment: Fixed periodic payment
        total_payments: payment * total_periods
        total_interest: Sum of the interest parts of every row
        schedule: Ordered rows, period 1..n (empty for degenerate input)
    """
    model_config = ConfigDict(frozen=True)

    payment: Decimal
    total_payments: Decimal
    total_interest: Decimal
    schedule: List[AmortizationRow] = Field(default_factory=list)

    @property
    def total_periods(self) -> int:
        return len(self.schedule)


class YearlyAmortization(BaseModel):
    """Principal and interest paid during one loan year, with the closing balance."""
    model_config = ConfigDict(frozen=True)

    year: int
    principal_paid: Decimal
    interest_paid: Decimal
    closing_balance: Decimal
