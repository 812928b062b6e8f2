"""
Holding and portfolio schemas.

**Models**:
- Holding: one position (quantity at an average cost, valued at a current price)
- HoldingMetrics: derived cost/value/gain figures of one holding
- HoldingSnapshot: a holding paired with its metrics (top performer, largest position)
- PortfolioTotals / PortfolioSummary: aggregate figures over a holding collection
- AllocationSlice: share of one label in a total
- YieldType / YieldInput: yield-bearing assets (rental property, P2P, ...)
- AssetComponents: per-asset-class totals feeding net worth

**Design Notes**:
- Derived figures are never stored on Holding; they are recomputed on every call
- Decimal everywhere; input numbers are coerced through str() like Currency.amount
"""
# Postpones evaluation of type hints to improve imports and performance. Also avoid circular import issues.
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from fincore.app.schemas.common import Currency
from fincore.app.utils.decimal_utils import to_decimal
from fincore.app.utils.validation_utils import parse_non_negative


class Holding(BaseModel):
    """
    A position in a financial instrument.

    Attributes:
        quantity: Units held (>= 0)
        average_cost: Average purchase price per unit, in `currency`
        current_price: Current market price per unit, in `currency`
        currency: ISO 4217 code (or crypto symbol) the prices are quoted in
        ticker: Optional instrument identifier (e.g. "BTC", "AAPL")
        name: Optional display name
        category: Optional grouping label for allocation (e.g. "crypto", "stocks")

    Example:
        {"quantity": "0.5", "average_cost": "40000", "current_price": "60000", "currency": "USD", "ticker": "BTC"}
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    quantity: Decimal
    average_cost: Decimal
    current_price: Decimal
    currency: str
    ticker: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def parse_quantity(cls, v):
        return parse_non_negative(v, "quantity")

    @field_validator("average_cost", "current_price", mode="before")
    @classmethod
    def parse_price(cls, v):
        return to_decimal(v)

    @field_validator("currency", mode="before")
    @classmethod
    def validate_currency(cls, v):
        return Currency.validate_code(v)

    @property
    def label(self) -> str:
        """Best available identifier: ticker, then name, then '?'."""
        return self.ticker or self.name or "?"


class HoldingMetrics(BaseModel):
    """Derived figures of one holding, all in the holding's currency."""
    model_config = ConfigDict(frozen=True)

    total_cost: Decimal
    market_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal


class HoldingSnapshot(BaseModel):
    """A holding together with its computed metrics."""
    model_config = ConfigDict(frozen=True)

    holding: Holding
    metrics: HoldingMetrics


class PortfolioTotals(BaseModel):
    """
    Aggregate figures over a holding collection.

    overall_gain_loss and overall_gain_loss_percent are derived once from the
    summed totals (sum-then-derive), never from per-holding percentages.
    """
    model_config = ConfigDict(frozen=True)

    total_value: Decimal
    total_cost: Decimal
    overall_gain_loss: Decimal
    overall_gain_loss_percent: Decimal

    @classmethod
    def empty(cls) -> 'PortfolioTotals':
        zero = Decimal("0")
        return cls(total_value=zero, total_cost=zero, overall_gain_loss=zero, overall_gain_loss_percent=zero)


class PortfolioSummary(BaseModel):
    """
    Totals plus the notable positions of a portfolio.

    Attributes:
        currency: Currency every figure is expressed in (None for an empty portfolio)
        totals: Aggregate figures
        largest_holding: Position with the highest market value
        top_performer: Position with the highest gain/loss percentage
    """
    model_config = ConfigDict(frozen=True)

    currency: Optional[str] = None
    totals: PortfolioTotals
    largest_holding: Optional[HoldingSnapshot] = None
    top_performer: Optional[HoldingSnapshot] = None


class AllocationGrouping(str, Enum):
    """How holdings are grouped in an allocation breakdown."""
    HOLDING = "holding"
    CATEGORY = "category"


class AllocationSlice(BaseModel):
    """Share of one label in a total (percent rounded for display-free consumers)."""
    model_config = ConfigDict(frozen=True)

    label: str
    value: Decimal
    percent: Decimal


class YieldType(str, Enum):
    """
    How the annual yield of an asset is specified.

    - NONE: no yield
    - FIXED: a fixed annual amount
    - PERCENT_PURCHASE: percentage of the purchase cost
    - PERCENT_MARKET: percentage of the current market value
    """
    NONE = "none"
    FIXED = "fixed"
    PERCENT_PURCHASE = "percent_purchase"
    PERCENT_MARKET = "percent_market"


class YieldInput(BaseModel):
    """
    Input for annual yield calculations.

    yield_value is an amount for FIXED and a percentage (5 = 5%) otherwise.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    yield_type: YieldType = YieldType.NONE
    yield_value: Decimal = Decimal("0")
    quantity: Decimal = Decimal("0")
    average_purchase_price: Decimal = Decimal("0")
    market_price: Decimal = Decimal("0")

    @field_validator("yield_value", "average_purchase_price", "market_price", mode="before")
    @classmethod
    def parse_decimal(cls, v):
        return to_decimal(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def parse_quantity(cls, v):
        return parse_non_negative(v, "quantity")


class AssetComponents(BaseModel):
    """
    Per-asset-class totals, already normalized to one currency.

    Attributes:
        exclude_personal_real_estate: Leave the owner's home out of total assets
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    savings: Decimal = Decimal("0")
    investments: Decimal = Decimal("0")
    crypto: Decimal = Decimal("0")
    bonds: Decimal = Decimal("0")
    real_estate_personal: Decimal = Decimal("0")
    real_estate_investment: Decimal = Decimal("0")
    exclude_personal_real_estate: bool = False

    @field_validator(
        "savings", "investments", "crypto", "bonds", "real_estate_personal", "real_estate_investment",
        mode="before"
        )
    @classmethod
    def parse_decimal(cls, v):
        return to_decimal(v)
