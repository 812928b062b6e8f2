"""
Validation utilities for Pydantic models.

Provides reusable validator functions shared by the schema modules, so that
every money, rate and quantity field is coerced and checked the same way.

Note: Currency validation is handled by Currency.validate_code()
in fincore.app.schemas.common
"""
from decimal import Decimal
from typing import Any, Optional

from fincore.app.utils.decimal_utils import to_decimal, to_optional_decimal


def parse_non_negative(value: Any, field_name: str) -> Decimal:
    """
    Coerce to Decimal and reject negative values.

    Args:
        value: Raw input (Decimal, int, float, str)
        field_name: Field name for error messages

    Raises:
        ValueError: If value is not numeric or is negative

    Examples:
        >>> parse_non_negative("10", "quantity")  # Decimal("10")
        >>> parse_non_negative(-1, "quantity")  # ValueError
    """
    result = to_decimal(value)
    if result < 0:
        raise ValueError(f"{field_name} must be non-negative (got {result})")
    return result


def parse_optional_non_negative(value: Any, field_name: str) -> Optional[Decimal]:
    """Same as parse_non_negative() but None/blank passes through as None."""
    result = to_optional_decimal(value)
    if result is not None and result < 0:
        raise ValueError(f"{field_name} must be non-negative (got {result})")
    return result


def parse_positive(value: Any, field_name: str) -> Decimal:
    """Coerce to Decimal and reject zero or negative values."""
    result = to_decimal(value)
    if result <= 0:
        raise ValueError(f"{field_name} must be positive (got {result})")
    return result


def normalize_currency_code(value: Any) -> str:
    """
    Strip and upper-case a currency code without checking it exists.

    Lookups in a rate table use this so that ' usd' and 'USD' hit the same entry.
    Full ISO 4217 validation lives in Currency.validate_code().
    """
    if not isinstance(value, str):
        raise ValueError(f"Currency code must be a string, got {type(value)}")
    code = value.strip().upper()
    if not code:
        raise ValueError("Currency code cannot be empty")
    return code
