"""
Net worth and change metrics.
"""
from decimal import Decimal

import pytest

from fincore.app.schemas.holdings import AssetComponents
from fincore.app.services.net_worth import (
    calculate_absolute_change,
    calculate_allocation_percentage,
    calculate_asset_breakdown,
    calculate_net_worth,
    calculate_percentage_change,
    calculate_total_assets,
    )


@pytest.fixture
def components() -> AssetComponents:
    return AssetComponents(
        savings=100000,
        investments=200000,
        crypto=50000,
        bonds=50000,
        real_estate_personal=500000,
        real_estate_investment=100000,
        )


# ============================================================================
# CHANGES
# ============================================================================

@pytest.mark.parametrize("current, previous, expected", [
    (120, 100, Decimal("20")),
    (85, 100, Decimal("-15")),
    (-50, -100, Decimal("50")),
    (100, 0, Decimal("0")),
    ])
def test_percentage_change(current, previous, expected):
    assert calculate_percentage_change(Decimal(current), Decimal(previous)) == expected


def test_absolute_change():
    assert calculate_absolute_change(Decimal("85"), Decimal("100")) == Decimal("-15")


# ============================================================================
# TOTALS
# ============================================================================

def test_total_assets(components):
    assert calculate_total_assets(components) == Decimal("1000000")


def test_total_assets_without_home(components):
    excluded = components.model_copy(update={"exclude_personal_real_estate": True})
    assert calculate_total_assets(excluded) == Decimal("500000")


def test_net_worth():
    assert calculate_net_worth(Decimal("1000000"), Decimal("350000")) == Decimal("650000")
    assert calculate_net_worth(Decimal("100"), Decimal("300")) == Decimal("-200")


# ============================================================================
# ALLOCATION
# ============================================================================

@pytest.mark.parametrize("value, total, expected", [
    (Decimal("1"), Decimal("3"), Decimal("33")),
    (Decimal("2"), Decimal("3"), Decimal("67")),
    (Decimal("1"), Decimal("8"), Decimal("13")),  # 12.5 rounds half-up
    (Decimal("5"), Decimal("0"), Decimal("0")),
    (Decimal("5"), Decimal("-10"), Decimal("0")),
    ])
def test_allocation_percentage(value, total, expected):
    assert calculate_allocation_percentage(value, total) == expected


def test_asset_breakdown(components):
    breakdown = calculate_asset_breakdown(components)

    assert [s.label for s in breakdown] == [
        "savings", "investments", "crypto", "bonds", "real_estate_personal", "real_estate_investment",
        ]
    assert [s.percent for s in breakdown] == [
        Decimal("10"), Decimal("20"), Decimal("5"), Decimal("5"), Decimal("50"), Decimal("10"),
        ]


def test_asset_breakdown_without_home(components):
    excluded = components.model_copy(update={"exclude_personal_real_estate": True})
    breakdown = calculate_asset_breakdown(excluded)

    assert "real_estate_personal" not in [s.label for s in breakdown]
    assert sum(s.value for s in breakdown) == Decimal("500000")
    assert breakdown[1].percent == Decimal("40")
