"""
Holding and portfolio metrics service.

Pure calculations over holding collections:
- per-holding cost, value and gain
- portfolio totals (sum-then-derive)
- top performer and largest position
- allocation breakdown by holding or category

Holdings quoted in different currencies are brought to one currency through
an ExchangeRateTable before anything is summed or compared. Without a table,
mixed currencies raise PortfolioError.
"""
from collections import OrderedDict
from decimal import Decimal
from typing import Callable, List, Optional, Sequence, Tuple

from fincore.app.config import get_settings
from fincore.app.logging_config import get_logger
from fincore.app.schemas.common import ExchangeRateTable
from fincore.app.schemas.holdings import (
    AllocationGrouping,
    AllocationSlice,
    Holding,
    HoldingMetrics,
    HoldingSnapshot,
    PortfolioSummary,
    PortfolioTotals,
    )
from fincore.app.services.fx import convert
from fincore.app.utils.decimal_utils import ZERO, quantize_decimal, safe_percent

logger = get_logger(__name__)

UNCATEGORIZED = "uncategorized"


class PortfolioError(Exception):
    """Raised when holdings cannot be aggregated (e.g. mixed currencies without rates)."""
    pass


# ============================================================================
# SINGLE HOLDING
# ============================================================================

def compute_holding_metrics(holding: Holding) -> HoldingMetrics:
    """
    Calculate cost, value and gain of one holding.

    Formulas:
        total_cost        = quantity * average_cost
        market_value      = quantity * current_price
        gain_loss         = market_value - total_cost
        gain_loss_percent = gain_loss / total_cost * 100   (0 if total_cost <= 0)

    Example:
        >>> h = Holding(quantity=2, average_cost=50, current_price=40, currency="USD")
        >>> compute_holding_metrics(h).gain_loss_percent
        Decimal("-20")
    """
    total_cost = holding.quantity * holding.average_cost
    market_value = holding.quantity * holding.current_price
    gain_loss = market_value - total_cost
    return HoldingMetrics(
        total_cost=total_cost,
        market_value=market_value,
        gain_loss=gain_loss,
        gain_loss_percent=safe_percent(gain_loss, total_cost),
        )


def snapshot(holding: Holding) -> HoldingSnapshot:
    """Pair a holding with its metrics."""
    return HoldingSnapshot(holding=holding, metrics=compute_holding_metrics(holding))


# ============================================================================
# CURRENCY NORMALIZATION
# ============================================================================

def normalize_holdings(
    holdings: Sequence[Holding],
    rate_table: ExchangeRateTable,
    target_currency: Optional[str] = None
    ) -> List[Holding]:
    """
    Express every holding's cost and price in one currency.

    Quantities are untouched; holdings already in the target currency are
    returned as they are.

    Args:
        holdings: Holdings in any currencies
        rate_table: Rate snapshot
        target_currency: Currency to convert to (default: the table's base)

    Raises:
        UnknownCurrencyError: If a holding's currency is not in the table
    """
    target = (target_currency or rate_table.base_currency).strip().upper()
    normalized = []
    for holding in holdings:
        if holding.currency == target:
            normalized.append(holding)
            continue
        normalized.append(holding.model_copy(update={
            "average_cost": convert(holding.average_cost, holding.currency, target, rate_table),
            "current_price": convert(holding.current_price, holding.currency, target, rate_table),
            "currency": target,
            }))
    return normalized


def _single_currency(
    holdings: Sequence[Holding],
    rate_table: Optional[ExchangeRateTable],
    target_currency: Optional[str]
    ) -> Tuple[List[Holding], Optional[str]]:
    """Bring holdings to one currency; returns (holdings, currency)."""
    if rate_table is not None:
        target = (target_currency or rate_table.base_currency).strip().upper()
        return normalize_holdings(holdings, rate_table, target), target

    currencies = sorted({holding.currency for holding in holdings})
    if len(currencies) > 1:
        raise PortfolioError(
            f"Holdings use several currencies ({', '.join(currencies)}); a rate table is required"
            )
    if not currencies:
        return [], target_currency
    if target_currency is not None and target_currency.strip().upper() != currencies[0]:
        raise PortfolioError(
            f"Holdings are in {currencies[0]}; converting to {target_currency} requires a rate table"
            )
    return list(holdings), currencies[0]


# ============================================================================
# PORTFOLIO AGGREGATES
# ============================================================================

def _totals_from_metrics(metrics: Sequence[HoldingMetrics]) -> PortfolioTotals:
    if not metrics:
        return PortfolioTotals.empty()

    total_value = sum((m.market_value for m in metrics), ZERO)
    total_cost = sum((m.total_cost for m in metrics), ZERO)
    overall_gain_loss = total_value - total_cost
    return PortfolioTotals(
        total_value=total_value,
        total_cost=total_cost,
        overall_gain_loss=overall_gain_loss,
        overall_gain_loss_percent=safe_percent(overall_gain_loss, total_cost),
        )


def compute_portfolio_totals(
    holdings: Sequence[Holding],
    rate_table: Optional[ExchangeRateTable] = None,
    target_currency: Optional[str] = None
    ) -> PortfolioTotals:
    """
    Aggregate totals over holdings.

    Sum-then-derive: values and costs are summed first and the overall gain
    and percentage are derived once from the sums, never averaged from
    per-holding percentages.

    Args:
        holdings: Holdings (empty -> all-zero totals)
        rate_table: Required when holdings use different currencies
        target_currency: Currency of the totals (default: table base, or the holdings' currency)

    Raises:
        PortfolioError: If currencies are mixed and no rate table is given
        UnknownCurrencyError: If a holding's currency is not in the table

    Example:
        >>> compute_portfolio_totals([
        ...     Holding(quantity=1, average_cost=100, current_price=150, currency="USD"),
        ...     Holding(quantity=2, average_cost=50, current_price=40, currency="USD"),
        ... ])
        PortfolioTotals(total_value=230, total_cost=200, overall_gain_loss=30, overall_gain_loss_percent=15)
    """
    normalized, _ = _single_currency(holdings, rate_table, target_currency)
    return _totals_from_metrics([compute_holding_metrics(h) for h in normalized])


def _first_max(
    snapshots: Sequence[HoldingSnapshot],
    key: Callable[[HoldingSnapshot], Decimal]
    ) -> Optional[HoldingSnapshot]:
    """Snapshot with the highest key; on ties the earliest one wins."""
    best: Optional[HoldingSnapshot] = None
    for current in snapshots:
        if best is None or key(current) > key(best):
            best = current
    return best


def find_top_performer(holdings: Sequence[Holding]) -> Optional[HoldingSnapshot]:
    """
    Holding with the highest gain/loss percentage.

    Percentages don't depend on the quote currency, so no conversion is needed.

    Returns:
        Snapshot of the first holding with the maximum percentage, None if empty
    """
    return _first_max([snapshot(h) for h in holdings], lambda s: s.metrics.gain_loss_percent)


def find_largest_holding(
    holdings: Sequence[Holding],
    rate_table: Optional[ExchangeRateTable] = None,
    target_currency: Optional[str] = None
    ) -> Optional[HoldingSnapshot]:
    """
    Holding with the highest market value.

    Values are compared in one currency; with a rate table the returned
    snapshot carries the converted holding.

    Returns:
        Snapshot of the first holding with the maximum market value, None if empty

    Raises:
        PortfolioError: If currencies are mixed and no rate table is given
    """
    normalized, _ = _single_currency(holdings, rate_table, target_currency)
    return _first_max([snapshot(h) for h in normalized], lambda s: s.metrics.market_value)


def compute_portfolio_summary(
    holdings: Sequence[Holding],
    rate_table: Optional[ExchangeRateTable] = None,
    target_currency: Optional[str] = None
    ) -> PortfolioSummary:
    """
    Totals, largest holding and top performer in a single pass over the holdings.

    Raises:
        PortfolioError: If currencies are mixed and no rate table is given
    """
    normalized, currency = _single_currency(holdings, rate_table, target_currency)
    snapshots = [snapshot(h) for h in normalized]
    logger.debug(f"Portfolio summary over {len(snapshots)} holdings in {currency}")

    return PortfolioSummary(
        currency=currency,
        totals=_totals_from_metrics([s.metrics for s in snapshots]),
        largest_holding=_first_max(snapshots, lambda s: s.metrics.market_value),
        top_performer=_first_max(snapshots, lambda s: s.metrics.gain_loss_percent),
        )


# ============================================================================
# ALLOCATION
# ============================================================================

def compute_allocation(
    holdings: Sequence[Holding],
    rate_table: Optional[ExchangeRateTable] = None,
    target_currency: Optional[str] = None,
    grouping: AllocationGrouping = AllocationGrouping.HOLDING,
    decimals: Optional[int] = None
    ) -> List[AllocationSlice]:
    """
    Share of each holding (or category) in the portfolio's market value.

    Holdings with the same label are merged (the same ticker held twice is one
    slice). Slices come back largest first; equal values keep input order.

    Args:
        holdings: Holdings
        rate_table: Required when holdings use different currencies
        target_currency: Currency of the slice values
        grouping: HOLDING (by ticker/name) or CATEGORY
        decimals: Rounding of percent (default: Settings.PERCENT_DECIMALS)

    Returns:
        Slices with value and percent of the total (percent 0 when the total is not positive)
    """
    if decimals is None:
        decimals = get_settings().PERCENT_DECIMALS

    normalized, _ = _single_currency(holdings, rate_table, target_currency)

    values: "OrderedDict[str, Decimal]" = OrderedDict()
    for holding in normalized:
        if grouping == AllocationGrouping.CATEGORY:
            label = holding.category or UNCATEGORIZED
        else:
            label = holding.label
        values[label] = values.get(label, ZERO) + compute_holding_metrics(holding).market_value

    total = sum(values.values(), ZERO)
    slices = [
        AllocationSlice(label=label, value=value, percent=quantize_decimal(safe_percent(value, total), decimals))
        for label, value in values.items()
        ]
    return sorted(slices, key=lambda s: s.value, reverse=True)
