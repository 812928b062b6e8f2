"""
Tiered interest zone schemas.

A savings account may attach a set of zones to its balance: each zone is a
half-open amount interval [from_amount, to_amount) paying its own annual
rate. A zone without to_amount is unbounded.

**Models**:
- InterestZone: one zone as authored by the user (fields may be missing while editing)
- InterestAccount: balance + flat rate + zones, input to the weighted savings rate
- ZoneEarnings: yearly earnings projected from a tiered balance

**Design Notes**:
- from_amount and interest_rate are Optional on purpose: a half-filled edit form is
  representable, and the zone validator reports it as a MissingFieldError instead of
  the model refusing to exist
- Range ordering (to_amount > from_amount) and overlaps are judged by
  services.interest_zones, never by the model, so that they come back as typed errors
"""
# Postpones evaluation of type hints to improve imports and performance. Also avoid circular import issues.
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fincore.app.schemas.common import Currency
from fincore.app.utils.decimal_utils import to_decimal, to_optional_decimal
from fincore.app.utils.validation_utils import parse_optional_non_negative


class InterestZone(BaseModel):
    """
    One tier of a tiered interest rate.

    Attributes:
        from_amount: Inclusive lower bound of the balance slice (>= 0)
        to_amount: Exclusive upper bound, None for an unbounded top zone
        interest_rate: Annual rate as percentage (2.5 = 2.5%)

    Example:
        {"from_amount": "0", "to_amount": "10000", "interest_rate": "1.0"}
        {"from_amount": "50000", "to_amount": None, "interest_rate": "3.0"}
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    from_amount: Optional[Decimal] = None
    to_amount: Optional[Decimal] = None
    interest_rate: Optional[Decimal] = None

    @field_validator("from_amount", mode="before")
    @classmethod
    def parse_from_amount(cls, v):
        return parse_optional_non_negative(v, "from_amount")

    @field_validator("to_amount", mode="before")
    @classmethod
    def parse_to_amount(cls, v):
        return to_optional_decimal(v)

    @field_validator("interest_rate", mode="before")
    @classmethod
    def parse_rate(cls, v):
        return to_optional_decimal(v)

    @property
    def is_unbounded(self) -> bool:
        """True when the zone has no upper limit."""
        return self.to_amount is None

    def contains(self, balance: Decimal) -> bool:
        """
        Whether balance falls in [from_amount, to_amount).

        Assumes from_amount is set; callers check completeness first.
        """
        if balance < self.from_amount:
            return False
        return self.to_amount is None or balance < self.to_amount

    def describe_range(self) -> str:
        """Human-readable range, e.g. '10000 - 50000' or '50000 - unlimited'."""
        upper = "unlimited" if self.to_amount is None else str(self.to_amount)
        return f"{self.from_amount} - {upper}"


class InterestAccount(BaseModel):
    """
    Interest-bearing account as seen by the rate computations.

    Attributes:
        balance: Current balance in `currency`
        currency: ISO 4217 code of the balance
        interest_rate: Flat annual rate (percentage), used when no zone applies
        zones: Optional tiered zones
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    balance: Decimal
    currency: str
    interest_rate: Decimal = Decimal("0")
    zones: List[InterestZone] = Field(default_factory=list)

    @field_validator("balance", "interest_rate", mode="before")
    @classmethod
    def parse_decimal(cls, v):
        return to_decimal(v)

    @field_validator("currency", mode="before")
    @classmethod
    def validate_currency(cls, v):
        return Currency.validate_code(v)


class ZoneEarnings(BaseModel):
    """
    Yearly earnings of a balance spread across tiered zones.

    Attributes:
        balance: Balance the projection was computed for
        projected_earnings: Sum over zones of slice * rate / 100
        blended_rate: projected_earnings / balance * 100 (0 for non-positive balance)
    """
    model_config = ConfigDict(frozen=True)

    balance: Decimal
    projected_earnings: Decimal
    blended_rate: Decimal
