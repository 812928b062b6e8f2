"""
Yield metrics for income-generating assets (rental property, P2P loans, ...).

The yield of an asset is either a fixed annual amount or a percentage of its
cost or of its current market value.
"""
from decimal import Decimal

from fincore.app.schemas.holdings import YieldInput, YieldType
from fincore.app.utils.decimal_utils import ZERO, HUNDRED, safe_percent, to_decimal


def calculate_annual_yield(yield_input: YieldInput) -> Decimal:
    """
    Annual yield amount, in the asset's currency.

    - NONE: 0
    - FIXED: yield_value
    - PERCENT_PURCHASE: yield_value% of quantity * average_purchase_price
    - PERCENT_MARKET: yield_value% of quantity * market_price
    """
    if yield_input.yield_type == YieldType.FIXED:
        return yield_input.yield_value
    elif yield_input.yield_type == YieldType.PERCENT_PURCHASE:
        total_cost = yield_input.quantity * yield_input.average_purchase_price
        return yield_input.yield_value / HUNDRED * total_cost
    elif yield_input.yield_type == YieldType.PERCENT_MARKET:
        market_value = yield_input.quantity * yield_input.market_price
        return yield_input.yield_value / HUNDRED * market_value
    return ZERO


def calculate_yield_percent_on_cost(annual_yield: Decimal, total_cost: Decimal) -> Decimal:
    """Yield as a percentage of purchase cost (0 if cost <= 0)."""
    return safe_percent(to_decimal(annual_yield), to_decimal(total_cost))


def calculate_yield_percent_on_market(annual_yield: Decimal, market_value: Decimal) -> Decimal:
    """Yield as a percentage of market value (0 if value <= 0)."""
    return safe_percent(to_decimal(annual_yield), to_decimal(market_value))
