"""
Services package.
Stateless financial computations over the schemas package.

- fx: currency conversion through an explicit rate table
- interest_zones: tiered savings zones (validation, rate resolution, earnings)
- amortization: annuity loan schedules
- portfolio_metrics: holding and portfolio aggregates, allocation
- yield_metrics: income of yield-bearing assets
- net_worth: total assets, net worth and change metrics
"""
from fincore.app.services.fx import (
    FXServiceError,
    UnknownCurrencyError,
    convert,
    convert_bulk,
    )
from fincore.app.services.interest_zones import (
    ZoneError,
    NoMatchingZoneError,
    ZoneValidationError,
    MissingFieldError,
    InvalidRangeError,
    MultipleUnboundedZonesError,
    ZoneOverlapError,
    validate_zone,
    resolve_effective_rate,
    )
from fincore.app.services.amortization import AmortizationError, generate_amortization_schedule
from fincore.app.services.portfolio_metrics import (
    PortfolioError,
    compute_holding_metrics,
    compute_portfolio_totals,
    find_top_performer,
    )

__all__ = [
    "FXServiceError",
    "UnknownCurrencyError",
    "convert",
    "convert_bulk",
    "ZoneError",
    "NoMatchingZoneError",
    "ZoneValidationError",
    "MissingFieldError",
    "InvalidRangeError",
    "MultipleUnboundedZonesError",
    "ZoneOverlapError",
    "validate_zone",
    "resolve_effective_rate",
    "AmortizationError",
    "generate_amortization_schedule",
    "PortfolioError",
    "compute_holding_metrics",
    "compute_portfolio_totals",
    "find_top_performer",
    ]
