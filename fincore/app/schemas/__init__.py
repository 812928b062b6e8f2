"""
Pydantic schemas for FinCore.

Value structs built once at the boundary of the computation core: the
services never accept loosely-typed dicts, only these validated models.

**Organization by Domain**:
- common.py: Currency (money amount), ExchangeRateTable
- zones.py: InterestZone, InterestAccount, ZoneEarnings
- loans.py: PaymentPeriodicity, LoanTerms, AmortizationRow, AnnuitySchedule, YearlyAmortization
- holdings.py: Holding, HoldingMetrics, PortfolioTotals, PortfolioSummary, AllocationSlice,
  YieldType, YieldInput, AssetComponents

**Design Notes**:
- All models use Pydantic v2; numeric fields are Decimal
- Snapshot models are frozen (immutable)
"""
from fincore.app.schemas.common import (
    Currency,
    CRYPTO_CURRENCIES,
    ExchangeRateTable,
    )
from fincore.app.schemas.holdings import (
    Holding,
    HoldingMetrics,
    HoldingSnapshot,
    PortfolioTotals,
    PortfolioSummary,
    AllocationGrouping,
    AllocationSlice,
    YieldType,
    YieldInput,
    AssetComponents,
    )
from fincore.app.schemas.loans import (
    PaymentPeriodicity,
    LoanTerms,
    AmortizationRow,
    AnnuitySchedule,
    YearlyAmortization,
    )
from fincore.app.schemas.zones import (
    InterestZone,
    InterestAccount,
    ZoneEarnings,
    )

__all__ = [
    # Common
    "Currency",
    "CRYPTO_CURRENCIES",
    "ExchangeRateTable",
    # Holdings
    "Holding",
    "HoldingMetrics",
    "HoldingSnapshot",
    "PortfolioTotals",
    "PortfolioSummary",
    "AllocationGrouping",
    "AllocationSlice",
    "YieldType",
    "YieldInput",
    "AssetComponents",
    # Loans
    "PaymentPeriodicity",
    "LoanTerms",
    "AmortizationRow",
    "AnnuitySchedule",
    "YearlyAmortization",
    # Zones
    "InterestZone",
    "InterestAccount",
    "ZoneEarnings",
    ]
