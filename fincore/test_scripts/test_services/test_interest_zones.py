"""
Tiered interest zones.
Tests zone validation (add and edit), effective rate resolution at zone
boundaries, tiered earnings and the balance-weighted savings rate.
"""
from decimal import Decimal

import pytest

from fincore.app.schemas.common import ExchangeRateTable
from fincore.app.schemas.zones import InterestAccount, InterestZone
from fincore.app.services.interest_zones import (
    InvalidRangeError,
    MissingFieldError,
    MultipleUnboundedZonesError,
    NoMatchingZoneError,
    ZoneOverlapError,
    ZoneValidationError,
    calculate_tiered_earnings,
    calculate_weighted_average_rate,
    ensure_valid_zone,
    resolve_account_rate,
    resolve_effective_rate,
    sort_zones,
    validate_zone,
    validate_zone_set,
    zones_overlap,
    )


def zone(from_amount, to_amount, rate) -> InterestZone:
    return InterestZone(from_amount=from_amount, to_amount=to_amount, interest_rate=rate)


@pytest.fixture
def tiers():
    """[0, 10k) @ 1%, [10k, 50k) @ 2%, [50k, inf) @ 3%"""
    return [zone(0, 10000, 1), zone(10000, 50000, 2), zone(50000, None, 3)]


# ============================================================================
# VALIDATION
# ============================================================================

class TestValidateZone:

    def test_valid_zone_in_empty_set(self):
        assert validate_zone(zone(0, 1000, 1), []) is None

    def test_adjacent_zones_do_not_overlap(self):
        """[0, 10000) and [10000, 20000) share only an excluded endpoint."""
        assert validate_zone(zone(10000, 20000, 2), [zone(0, 10000, 1)]) is None

    def test_gap_is_allowed(self):
        assert validate_zone(zone(20000, 30000, 2), [zone(0, 10000, 1)]) is None

    def test_overlap_is_reported_with_conflicting_zone(self):
        existing = zone(0, 10000, 1)
        error = validate_zone(zone(5000, 15000, 2), [existing])

        assert isinstance(error, ZoneOverlapError)
        assert error.conflicting_zone == existing
        assert "5000 - 15000" in str(error)
        assert "0 - 10000" in str(error)

    def test_unbounded_overlapping_bounded(self):
        assert isinstance(validate_zone(zone(5000, None, 2), [zone(0, 10000, 1)]), ZoneOverlapError)

    def test_bounded_below_unbounded_is_fine(self):
        assert validate_zone(zone(0, 50000, 2), [zone(50000, None, 3)]) is None

    def test_bounded_reaching_into_unbounded_overlaps(self):
        existing = zone(50000, None, 3)
        error = validate_zone(zone(40000, 60000, 2), [existing])

        assert isinstance(error, ZoneOverlapError)
        assert error.conflicting_zone == existing

    def test_second_unbounded_zone_rejected(self):
        existing = zone(50000, None, 3)
        error = validate_zone(zone(100000, None, 4), [existing])

        assert isinstance(error, MultipleUnboundedZonesError)
        assert error.existing_zone == existing

    @pytest.mark.parametrize("to_amount", [1000, 500])
    def test_invalid_range(self, to_amount):
        """to_amount must be strictly greater than from_amount."""
        assert isinstance(validate_zone(zone(1000, to_amount, 1), []), InvalidRangeError)

    def test_missing_fields(self):
        error = validate_zone(InterestZone(to_amount=1000), [])

        assert isinstance(error, MissingFieldError)
        assert error.fields == ["from_amount", "interest_rate"]

    def test_incomplete_existing_zone_reported(self):
        broken = InterestZone(from_amount=0)
        error = validate_zone(zone(5000, 6000, 1), [broken])
        assert isinstance(error, MissingFieldError)
        assert error.zone == broken

    def test_editing_ignores_old_self(self, tiers):
        """Widening the middle zone within its neighbours must not clash with its old version."""
        assert validate_zone(zone(10000, 50000, 2.5), tiers, editing_index=1) is None

    def test_editing_still_checks_neighbours(self, tiers):
        error = validate_zone(zone(5000, 50000, 2), tiers, editing_index=1)
        assert isinstance(error, ZoneOverlapError)
        assert error.conflicting_zone == tiers[0]

    def test_editing_unbounded_zone_keeps_it_unbounded(self, tiers):
        assert validate_zone(zone(60000, None, 3.5), tiers, editing_index=2) is None

    def test_all_errors_share_base_class(self):
        assert issubclass(ZoneOverlapError, ZoneValidationError)
        assert issubclass(MissingFieldError, ZoneValidationError)


def test_zones_overlap_is_symmetric_for_bounded():
    a, b = zone(0, 100, 1), zone(50, 150, 1)
    assert zones_overlap(a, b) and zones_overlap(b, a)


def test_two_unbounded_zones_always_overlap():
    assert zones_overlap(zone(0, None, 1), zone(10, None, 2)) is True
    assert zones_overlap(zone(1000000, None, 1), zone(0, None, 2)) is True


def test_validate_zone_set(tiers):
    assert validate_zone_set(tiers) is None
    assert isinstance(validate_zone_set(tiers + [zone(40000, 45000, 9)]), ZoneOverlapError)


def test_ensure_valid_zone_raises():
    with pytest.raises(ZoneOverlapError):
        ensure_valid_zone(zone(0, 100, 1), [zone(50, 150, 1)])


# ============================================================================
# RATE RESOLUTION
# ============================================================================

class TestResolveEffectiveRate:

    @pytest.mark.parametrize("balance, expected", [
        (0, 1),
        (9999.99, 1),
        (10000, 2),
        (49999, 2),
        (50000, 3),
        (10 ** 9, 3),
        ])
    def test_boundaries(self, tiers, balance, expected):
        """Lower bound inclusive, upper bound exclusive."""
        assert resolve_effective_rate(Decimal(str(balance)), tiers) == Decimal(expected)

    def test_unsorted_input(self, tiers):
        shuffled = [tiers[2], tiers[0], tiers[1]]
        assert resolve_effective_rate(Decimal("25000"), shuffled) == Decimal("2")

    def test_balance_in_gap_raises(self):
        with pytest.raises(NoMatchingZoneError):
            resolve_effective_rate(Decimal("15000"), [zone(0, 10000, 1), zone(20000, None, 2)])

    def test_empty_zones_raise(self):
        with pytest.raises(NoMatchingZoneError) as exc:
            resolve_effective_rate(Decimal("100"), [])
        assert exc.value.zone_count == 0

    def test_below_first_zone_raises(self):
        with pytest.raises(NoMatchingZoneError):
            resolve_effective_rate(Decimal("500"), [zone(1000, None, 2)])


def test_resolve_account_rate_falls_back(tiers):
    assert resolve_account_rate(Decimal("60000"), tiers, Decimal("0.5")) == Decimal("3")
    assert resolve_account_rate(Decimal("60000"), [], Decimal("0.5")) == Decimal("0.5")
    assert resolve_account_rate(Decimal("100"), [zone(1000, None, 2)], Decimal("0.5")) == Decimal("0.5")


def test_sort_zones_is_stable_by_from_amount(tiers):
    assert sort_zones([tiers[1], tiers[2], tiers[0]]) == tiers


# ============================================================================
# EARNINGS AND WEIGHTED RATE
# ============================================================================

def test_tiered_earnings(tiers):
    """100 + 800 + 300 = 1200 on 60000, blended 2%."""
    result = calculate_tiered_earnings(Decimal("60000"), tiers)

    assert result.projected_earnings == Decimal("1200")
    assert result.blended_rate == Decimal("2")


def test_tiered_earnings_zero_balance(tiers):
    result = calculate_tiered_earnings(Decimal("0"), tiers)
    assert result.projected_earnings == Decimal("0")
    assert result.blended_rate == Decimal("0")


def test_weighted_average_rate():
    accounts = [
        InterestAccount(balance=10000, currency="CZK", interest_rate=2),
        InterestAccount(balance=30000, currency="CZK", interest_rate=4),
        InterestAccount(balance=50000, currency="CZK", interest_rate=0),  # excluded: no rate
        InterestAccount(balance=-100, currency="CZK", interest_rate=5),  # excluded: overdrawn
        ]
    assert calculate_weighted_average_rate(accounts) == Decimal("3.5")


def test_weighted_average_rate_uses_zones(tiers):
    accounts = [InterestAccount(balance=60000, currency="CZK", interest_rate=0.1, zones=tiers)]
    assert calculate_weighted_average_rate(accounts) == Decimal("3")


def test_weighted_average_rate_mixed_currencies():
    accounts = [
        InterestAccount(balance=100, currency="CZK", interest_rate=1),
        InterestAccount(balance=4, currency="EUR", interest_rate=3),
        ]
    with pytest.raises(ValueError, match="rate table"):
        calculate_weighted_average_rate(accounts)

    table = ExchangeRateTable(base_currency="CZK", rates={"EUR": "0.04"})
    assert calculate_weighted_average_rate(accounts, rate_table=table) == Decimal("2")


def test_weighted_average_rate_empty():
    assert calculate_weighted_average_rate([]) == Decimal("0")
