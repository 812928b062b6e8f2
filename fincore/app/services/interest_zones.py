"""
Tiered interest zone service.

Resolves the interest rate that applies to a balance on an account with
tiered zones, judges whether a zone may be added to (or edited within) a
zone set, and projects the yearly earnings of a tiered balance.

Zone semantics:
- A zone covers the half-open interval [from_amount, to_amount)
- A zone without to_amount is unbounded (covers every balance >= from_amount)
- Gaps between zones are allowed, overlaps are not
- At most one unbounded zone per account

Design Notes:
- Stateless: the zone list is passed on every call and never mutated
- Zones are sorted by from_amount here, so callers may pass them in any order
- validate_zone() RETURNS the problem (or None); ensure_valid_zone() raises it
"""
from decimal import Decimal
from typing import List, Optional, Sequence

from fincore.app.logging_config import get_logger
from fincore.app.schemas.common import ExchangeRateTable
from fincore.app.schemas.zones import InterestZone, InterestAccount, ZoneEarnings
from fincore.app.services.fx import convert
from fincore.app.utils.decimal_utils import ZERO, HUNDRED, to_decimal, safe_percent

logger = get_logger(__name__)

REQUIRED_ZONE_FIELDS = ("from_amount", "interest_rate")


# ============================================================================
# EXCEPTIONS
# ============================================================================

class ZoneError(Exception):
    """Base exception for interest zone errors."""
    pass


class NoMatchingZoneError(ZoneError):
    """Raised when no zone covers the balance (e.g. empty zone list)."""

    def __init__(self, balance: Decimal, zone_count: int):
        self.balance = balance
        self.zone_count = zone_count
        super().__init__(f"No interest zone covers balance {balance} ({zone_count} zones defined)")


class ZoneValidationError(ZoneError):
    """Base class for a zone that cannot join a zone set."""

    def __init__(self, zone: InterestZone, message: str):
        self.zone = zone
        super().__init__(message)


class MissingFieldError(ZoneValidationError):
    """A required zone field (from_amount, interest_rate) is not set."""

    def __init__(self, zone: InterestZone, fields: List[str]):
        self.fields = fields
        super().__init__(zone, f"Zone is missing required field(s): {', '.join(fields)}")


class InvalidRangeError(ZoneValidationError):
    """to_amount is not strictly greater than from_amount."""

    def __init__(self, zone: InterestZone):
        super().__init__(
            zone,
            f"Zone upper limit {zone.to_amount} must be greater than its lower limit {zone.from_amount}"
            )


class MultipleUnboundedZonesError(ZoneValidationError):
    """A second zone without upper limit would join the set."""

    def __init__(self, zone: InterestZone, existing_zone: InterestZone):
        self.existing_zone = existing_zone
        super().__init__(
            zone,
            f"Only one unlimited zone is allowed; zone ({existing_zone.describe_range()}) is already unlimited"
            )


class ZoneOverlapError(ZoneValidationError):
    """The zone intersects another zone of the set."""

    def __init__(self, zone: InterestZone, conflicting_zone: InterestZone):
        self.conflicting_zone = conflicting_zone
        super().__init__(
            zone,
            f"Zone ({zone.describe_range()}) overlaps with existing zone ({conflicting_zone.describe_range()})"
            )


# ============================================================================
# HELPERS
# ============================================================================

def _missing_fields(zone: InterestZone) -> List[str]:
    return [name for name in REQUIRED_ZONE_FIELDS if getattr(zone, name) is None]


def _require_complete(zones: Sequence[InterestZone]) -> None:
    for zone in zones:
        missing = _missing_fields(zone)
        if missing:
            raise MissingFieldError(zone, missing)


def sort_zones(zones: Sequence[InterestZone]) -> List[InterestZone]:
    """
    Return zones ordered by ascending from_amount (stable for equal bounds).

    Raises:
        MissingFieldError: If a zone has no from_amount or interest_rate
    """
    _require_complete(zones)
    return sorted(zones, key=lambda z: z.from_amount)


def zones_overlap(candidate: InterestZone, existing: InterestZone) -> bool:
    """
    Whether two complete zones intersect, using [from, to) semantics.

    - unbounded vs bounded:   candidate.from < existing.to
    - unbounded vs unbounded: always
    - bounded vs unbounded:   candidate.to > existing.from
    - bounded vs bounded:     candidate.from < existing.to and candidate.to > existing.from
    """
    if candidate.is_unbounded:
        if existing.is_unbounded:
            return True
        return candidate.from_amount < existing.to_amount

    if existing.is_unbounded:
        return candidate.to_amount > existing.from_amount

    return candidate.from_amount < existing.to_amount and candidate.to_amount > existing.from_amount


# ============================================================================
# VALIDATION
# ============================================================================

def validate_zone(
    candidate: InterestZone,
    zones: Sequence[InterestZone],
    editing_index: Optional[int] = None
    ) -> Optional[ZoneValidationError]:
    """
    Judge whether a zone can be added to (or replace one of) the zone set.

    Rules, checked in order:
        1. from_amount and interest_rate are present        -> MissingFieldError
        2. to_amount, if present, is > from_amount           -> InvalidRangeError
        3. at most one unbounded zone in the resulting set   -> MultipleUnboundedZonesError
        4. no overlap with any other zone                    -> ZoneOverlapError

    Args:
        candidate: Zone being added or edited
        zones: Current zone set (any order)
        editing_index: Index in `zones` of the zone being edited; it is left out
            of the comparison so a zone never conflicts with its old self

    Returns:
        The first problem found, or None if the candidate is acceptable.
        Nothing is corrected: the caller decides what to show the user.

    Example:
        >>> existing = [InterestZone(from_amount=0, to_amount=10000, interest_rate=1)]
        >>> validate_zone(InterestZone(from_amount=5000, to_amount=15000, interest_rate=2), existing)
        ZoneOverlapError('Zone (5000 - 15000) overlaps with existing zone (0 - 10000)')
    """
    missing = _missing_fields(candidate)
    if missing:
        return MissingFieldError(candidate, missing)

    if candidate.to_amount is not None and candidate.to_amount <= candidate.from_amount:
        return InvalidRangeError(candidate)

    others = [zone for index, zone in enumerate(zones) if index != editing_index]

    for zone in others:
        missing = _missing_fields(zone)
        if missing:
            return MissingFieldError(zone, missing)

    if candidate.is_unbounded:
        existing_unbounded = next((zone for zone in others if zone.is_unbounded), None)
        if existing_unbounded is not None:
            return MultipleUnboundedZonesError(candidate, existing_unbounded)

    for zone in others:
        if zones_overlap(candidate, zone):
            return ZoneOverlapError(candidate, zone)

    return None


def validate_zone_set(zones: Sequence[InterestZone]) -> Optional[ZoneValidationError]:
    """
    Validate a whole zone set: every zone is checked against all the others.

    Returns:
        The first problem found (in list order), or None
    """
    for index, zone in enumerate(zones):
        error = validate_zone(zone, zones, editing_index=index)
        if error is not None:
            return error
    return None


def ensure_valid_zone(
    candidate: InterestZone,
    zones: Sequence[InterestZone],
    editing_index: Optional[int] = None
    ) -> None:
    """
    Raising variant of validate_zone().

    Raises:
        ZoneValidationError: (subclass) describing the first problem found
    """
    error = validate_zone(candidate, zones, editing_index)
    if error is not None:
        logger.warning(f"Rejected interest zone: {error}")
        raise error


# ============================================================================
# RATE RESOLUTION
# ============================================================================

def resolve_effective_rate(balance: Decimal, zones: Sequence[InterestZone]) -> Decimal:
    """
    Find the rate of the zone containing the balance.

    The lower bound is inclusive and the upper bound exclusive: with zones
    [10000, 50000) and [50000, inf), a balance of exactly 50000 gets the
    second zone's rate.

    Args:
        balance: Account balance
        zones: Zone set (any order)

    Returns:
        Annual rate (percentage) of the matching zone

    Raises:
        NoMatchingZoneError: If no zone covers the balance (caller falls back to a flat rate)
        MissingFieldError: If a zone is incomplete
    """
    balance = to_decimal(balance)
    for zone in sort_zones(zones):
        if zone.contains(balance):
            return zone.interest_rate
    raise NoMatchingZoneError(balance, len(zones))


def resolve_account_rate(balance: Decimal, zones: Sequence[InterestZone], flat_rate: Decimal) -> Decimal:
    """
    Rate for an account: the matching zone's rate, or the flat stored rate
    when the account has no zones or none covers the balance.
    """
    if not zones:
        return to_decimal(flat_rate)
    try:
        return resolve_effective_rate(balance, zones)
    except NoMatchingZoneError as e:
        logger.debug(f"Falling back to flat rate {flat_rate}: {e}")
        return to_decimal(flat_rate)


def calculate_tiered_earnings(balance: Decimal, zones: Sequence[InterestZone]) -> ZoneEarnings:
    """
    Project one year of earnings with each zone paying on its own slice.

    For every zone below the balance, the slice min(balance, to_amount) - from_amount
    earns the zone's rate. The blended rate is earnings / balance * 100.

    Example:
        balance 60000 with [0,10000)@1%, [10000,50000)@2%, [50000,inf)@3%
        -> 100 + 800 + 300 = 1200 earnings, blended rate 2%

    Raises:
        MissingFieldError: If a zone is incomplete
    """
    balance = to_decimal(balance)
    earnings = ZERO

    for zone in sort_zones(zones):
        if balance <= zone.from_amount:
            continue
        upper = balance if zone.to_amount is None else min(balance, zone.to_amount)
        slice_amount = upper - zone.from_amount
        if slice_amount > 0:
            earnings += slice_amount * zone.interest_rate / HUNDRED

    return ZoneEarnings(
        balance=balance,
        projected_earnings=earnings,
        blended_rate=safe_percent(earnings, balance),
        )


def calculate_weighted_average_rate(
    accounts: Sequence[InterestAccount],
    rate_table: Optional[ExchangeRateTable] = None,
    target_currency: Optional[str] = None
    ) -> Decimal:
    """
    Balance-weighted average rate over interest-bearing accounts.

    Each account contributes its resolved rate (zone or flat). Accounts with a
    non-positive balance or a zero rate are left out, so idle current accounts
    don't drag the average down.

    Args:
        accounts: Accounts to average
        rate_table: Needed when accounts use different currencies; balances are
            converted to target_currency (default: the table's base) before weighting
        target_currency: Currency balances are compared in

    Returns:
        Weighted rate (percentage), 0 if no account qualifies

    Raises:
        ValueError: If accounts mix currencies and no rate table is given
        UnknownCurrencyError: If a currency is missing from the rate table
    """
    if rate_table is None:
        currencies = {account.currency for account in accounts}
        if len(currencies) > 1:
            raise ValueError(
                f"Accounts use several currencies ({', '.join(sorted(currencies))}); "
                f"a rate table is required"
                )
    else:
        target_currency = target_currency or rate_table.base_currency

    weighted_sum = ZERO
    total_balance = ZERO

    for account in accounts:
        rate = resolve_account_rate(account.balance, account.zones, account.interest_rate)
        balance = account.balance
        if rate_table is not None:
            balance = convert(balance, account.currency, target_currency, rate_table)
        if balance <= 0 or rate <= 0:
            continue
        weighted_sum += balance * rate
        total_balance += balance

    if total_balance <= 0:
        return ZERO
    return weighted_sum / total_balance
