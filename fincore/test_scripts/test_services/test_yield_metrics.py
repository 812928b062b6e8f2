"""
Yield metrics for income-generating assets.
"""
from decimal import Decimal

import pytest

from fincore.app.schemas.holdings import YieldInput, YieldType
from fincore.app.services.yield_metrics import (
    calculate_annual_yield,
    calculate_yield_percent_on_cost,
    calculate_yield_percent_on_market,
    )


def make_input(yield_type: YieldType, value) -> YieldInput:
    """Apartment bought for 2,000,000, now worth 2,500,000."""
    return YieldInput(
        yield_type=yield_type,
        yield_value=value,
        quantity=1,
        average_purchase_price=2000000,
        market_price=2500000,
        )


@pytest.mark.parametrize("yield_type, value, expected", [
    (YieldType.NONE, 5, Decimal("0")),
    (YieldType.FIXED, 120000, Decimal("120000")),
    (YieldType.PERCENT_PURCHASE, 5, Decimal("100000")),
    (YieldType.PERCENT_MARKET, 5, Decimal("125000")),
    ])
def test_annual_yield(yield_type, value, expected):
    assert calculate_annual_yield(make_input(yield_type, value)) == expected


def test_annual_yield_scales_with_quantity():
    yield_input = YieldInput(
        yield_type=YieldType.PERCENT_MARKET,
        yield_value="2.5",
        quantity=4,
        average_purchase_price=100,
        market_price=200,
        )
    assert calculate_annual_yield(yield_input) == Decimal("20")


def test_yield_percentages():
    assert calculate_yield_percent_on_cost(Decimal("100000"), Decimal("2000000")) == Decimal("5")
    assert calculate_yield_percent_on_market(Decimal("100000"), Decimal("2500000")) == Decimal("4")


@pytest.mark.parametrize("denominator", [Decimal("0"), Decimal("-1")])
def test_yield_percentages_guarded(denominator):
    assert calculate_yield_percent_on_cost(Decimal("100"), denominator) == Decimal("0")
    assert calculate_yield_percent_on_market(Decimal("100"), denominator) == Decimal("0")
