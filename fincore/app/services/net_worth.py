"""
Net worth and change metrics.

Dashboard-level figures: total assets from per-class totals, net worth,
period-over-period changes and the allocation of assets across classes.
Inputs are expected in one currency (convert with services.fx first).
"""
from decimal import Decimal
from typing import List

from fincore.app.schemas.holdings import AllocationSlice, AssetComponents
from fincore.app.utils.decimal_utils import ZERO, HUNDRED, quantize_decimal, safe_percent, to_decimal

# AssetComponents fields in display order
ASSET_CLASSES = (
    "savings",
    "investments",
    "crypto",
    "bonds",
    "real_estate_personal",
    "real_estate_investment",
    )


def calculate_percentage_change(current: Decimal, previous: Decimal) -> Decimal:
    """
    Change from previous to current, in percent of |previous|.

    A negative baseline keeps the sign meaningful: going from -100 to -50 is +50%.

    Returns:
        Percentage change (20 for +20%), 0 if previous is 0
    """
    current = to_decimal(current)
    previous = to_decimal(previous)
    if previous == 0:
        return ZERO
    return (current - previous) / abs(previous) * HUNDRED


def calculate_absolute_change(current: Decimal, previous: Decimal) -> Decimal:
    return to_decimal(current) - to_decimal(previous)


def calculate_total_assets(components: AssetComponents) -> Decimal:
    """Sum of all asset classes; personal real estate is skipped when excluded."""
    total = (
        components.savings
        + components.investments
        + components.crypto
        + components.bonds
        + components.real_estate_investment
    )
    if not components.exclude_personal_real_estate:
        total += components.real_estate_personal
    return total


def calculate_net_worth(total_assets: Decimal, total_liabilities: Decimal) -> Decimal:
    return to_decimal(total_assets) - to_decimal(total_liabilities)


def calculate_allocation_percentage(category_value: Decimal, total_assets: Decimal) -> Decimal:
    """
    Share of a category in total assets, rounded to a whole percent (half-up).

    Returns:
        Integer-valued Decimal, 0 if total_assets <= 0
    """
    return quantize_decimal(safe_percent(to_decimal(category_value), to_decimal(total_assets)), 0)


def calculate_asset_breakdown(components: AssetComponents) -> List[AllocationSlice]:
    """
    Allocation of total assets across asset classes.

    Every class is listed (zero-valued ones included) in a fixed order, except
    personal real estate when it is excluded from total assets.
    """
    total = calculate_total_assets(components)
    breakdown = []
    for asset_class in ASSET_CLASSES:
        if asset_class == "real_estate_personal" and components.exclude_personal_real_estate:
            continue
        value = getattr(components, asset_class)
        breakdown.append(AllocationSlice(
            label=asset_class,
            value=value,
            percent=calculate_allocation_percentage(value, total),
            ))
    return breakdown
