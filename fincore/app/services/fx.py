"""
FX (Foreign Exchange) service.
Handles currency conversion through an explicitly supplied ExchangeRateTable.

Rates are relative to the table's base currency: 1 base = rate * currency.
Every non-base pair is converted in two legs (from -> base -> to); no
direct cross rates are stored.

The rate table is a read-only snapshot passed on every call. This module
holds no cache and no module-level rates.
"""
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from fincore.app.logging_config import get_logger
from fincore.app.schemas.common import Currency, ExchangeRateTable
from fincore.app.utils.decimal_utils import ONE, to_decimal
from fincore.app.utils.validation_utils import normalize_currency_code

logger = get_logger(__name__)


# ============================================================================
# EXCEPTIONS
# ============================================================================

class FXServiceError(Exception):
    """Base exception for FX service errors."""
    pass


class UnknownCurrencyError(FXServiceError):
    """Raised when a currency code is not present in the supplied rate table."""

    def __init__(self, currency: str, base_currency: str, available: List[str]):
        self.currency = currency
        self.base_currency = base_currency
        self.available = available
        super().__init__(
            f"No exchange rate for {currency} in table based on {base_currency} "
            f"(available: {', '.join(available)})"
            )


# ============================================================================
# RATE LOOKUP
# ============================================================================

def get_rate(rate_table: ExchangeRateTable, currency: str) -> Decimal:
    """
    Get the rate of a currency (units per 1 base unit).

    Args:
        rate_table: Rate snapshot
        currency: Currency code (case-insensitive)

    Returns:
        Rate as Decimal (1 for the base currency)

    Raises:
        UnknownCurrencyError: If the currency is not in the table
    """
    code = normalize_currency_code(currency)
    if code == rate_table.base_currency:
        return ONE
    rate = rate_table.rates.get(code)
    if rate is None:
        raise UnknownCurrencyError(code, rate_table.base_currency, rate_table.currencies())
    return rate


# ============================================================================
# CURRENCY CONVERSION FUNCTIONS
# ============================================================================

def convert_from_base(amount: Decimal, to_currency: str, rate_table: ExchangeRateTable) -> Decimal:
    """Convert an amount expressed in the base currency: amount * rate[to]."""
    return to_decimal(amount) * get_rate(rate_table, to_currency)


def convert_to_base(amount: Decimal, from_currency: str, rate_table: ExchangeRateTable) -> Decimal:
    """Convert an amount into the base currency: amount / rate[from]."""
    return to_decimal(amount) / get_rate(rate_table, from_currency)


def convert(
    amount: Decimal,
    from_currency: str,
    to_currency: str,
    rate_table: ExchangeRateTable
    ) -> Decimal:
    """
    Convert a single amount from one currency to another.

    Paths:
        - from == to: amount returned unchanged (no lookup, no arithmetic)
        - from == base: amount * rate[to]
        - to == base: amount / rate[from]
        - otherwise: amount / rate[from] * rate[to] (via base)

    Args:
        amount: Amount to convert
        from_currency: Source currency code
        to_currency: Target currency code
        rate_table: Rate snapshot

    Returns:
        Converted amount

    Raises:
        UnknownCurrencyError: If either currency is missing from the table

    Example:
        >>> table = ExchangeRateTable(base_currency="CZK", rates={"EUR": "25"})
        >>> convert(Decimal("100"), "CZK", "EUR", table)
        Decimal("2500")
    """
    amount = to_decimal(amount)
    from_code = normalize_currency_code(from_currency)
    to_code = normalize_currency_code(to_currency)
    base = rate_table.base_currency

    # Identity conversions don't need a rate lookup
    if from_code == to_code:
        return amount

    if from_code == base:
        return convert_from_base(amount, to_code, rate_table)

    if to_code == base:
        return convert_to_base(amount, from_code, rate_table)

    # Cross conversion via base
    from_rate = get_rate(rate_table, from_code)
    to_rate = get_rate(rate_table, to_code)
    return amount / from_rate * to_rate


def cross_rate(from_currency: str, to_currency: str, rate_table: ExchangeRateTable) -> Decimal:
    """Implied rate: how many units of to_currency one unit of from_currency buys."""
    return convert(ONE, from_currency, to_currency, rate_table)


def convert_money(money: Currency, to_currency: str, rate_table: ExchangeRateTable) -> Currency:
    """
    Convert a Currency amount, keeping the result currency-tagged.

    Raises:
        UnknownCurrencyError: If either currency is missing from the table
    """
    converted = convert(money.amount, money.code, to_currency, rate_table)
    return Currency(code=to_currency, amount=converted)


def convert_bulk(
    conversions: List[Tuple[Any, str, str]],  # [(amount, from, to), ...]
    rate_table: ExchangeRateTable,
    raise_on_error: bool = True
    ) -> Tuple[List[Optional[Decimal]], List[str]]:
    """
    Convert multiple amounts against the same rate snapshot.

    Each conversion is independent: with raise_on_error=False a failing item
    produces None in results and a message in errors, and the others proceed.

    Args:
        conversions: List of (amount, from_currency, to_currency) tuples
        rate_table: Rate snapshot
        raise_on_error: If True, raise on first error. If False, collect errors and continue

    Returns:
        Tuple of (results, errors) where:
        - results: converted amounts, or None for failed conversions (same order as input)
        - errors: messages for failed conversions, prefixed with their index

    Raises:
        UnknownCurrencyError: If any conversion fails and raise_on_error=True
    """
    results: List[Optional[Decimal]] = []
    errors: List[str] = []

    for idx, (amount, from_currency, to_currency) in enumerate(conversions):
        try:
            results.append(convert(amount, from_currency, to_currency, rate_table))
        except (UnknownCurrencyError, ValueError) as e:
            if raise_on_error:
                raise
            logger.warning(f"Conversion {idx} failed: {e}")
            errors.append(f"Conversion {idx}: {e}")
            results.append(None)

    return results, errors
