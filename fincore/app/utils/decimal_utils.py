"""
Decimal utilities for FinCore.

All money, rate and quantity values in the core are `decimal.Decimal`.
These helpers coerce raw edge input (int, float, str) into Decimal and
quantize results where a fixed number of decimals is part of the contract.

Usage:
    from fincore.app.utils.decimal_utils import to_decimal, quantize_decimal

    to_decimal(100.5)               # Decimal("100.5")
    quantize_decimal(Decimal("15.456"), 2)  # Decimal("15.46")
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a numeric input to Decimal.

    Floats go through str() so that 0.1 becomes Decimal("0.1") and not the
    binary expansion of the float.

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Decimal value

    Raises:
        ValueError: If value is None, a bool, not numeric, or not finite
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Expected a numeric value, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to Decimal")
    else:
        raise ValueError(f"Amount must be numeric, got {type(value)}")

    if not result.is_finite():
        raise ValueError(f"Value must be finite, got {value!r}")
    return result


def to_optional_decimal(value: Any) -> Optional[Decimal]:
    """
    Like to_decimal() but maps None and blank strings to None.

    Used for optional form fields (e.g. a zone's upper bound).
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return to_decimal(value)


def quantize_decimal(value: Decimal, decimals: int, rounding: str = ROUND_HALF_UP) -> Decimal:
    """
    Round a Decimal to a fixed number of decimal places.

    Args:
        value: Value to round
        decimals: Number of digits after the decimal point (0 for integers)
        rounding: decimal rounding mode (default ROUND_HALF_UP)

    Returns:
        Quantized Decimal

    Example:
        >>> quantize_decimal(Decimal("33.335"), 2)
        Decimal("33.34")
        >>> quantize_decimal(Decimal("66.6"), 0)
        Decimal("67")
    """
    quantizer = Decimal(10) ** -decimals
    return value.quantize(quantizer, rounding=rounding)


def safe_percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    numerator / denominator * 100, or 0 when the denominator is not positive.

    Division by zero is never propagated as an error or an infinity.
    """
    if denominator <= 0:
        return ZERO
    return numerator / denominator * HUNDRED
