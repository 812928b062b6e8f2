"""
Common schemas shared across the computation core.

**Domain Coverage**:
- Currency: a money amount tagged with its currency code
- ExchangeRateTable: immutable snapshot of rates relative to one base currency

**Design Notes**:
- Currency codes are validated against ISO 4217 (pycountry) plus a fixed set of crypto symbols
- Rate tables are supplied fresh by the caller on every computation; nothing here caches them
"""
# Postpones evaluation of type hints to improve imports and performance. Also avoid circular import issues.
from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import pycountry
from pydantic import BaseModel, Field, ConfigDict, field_serializer, field_validator, model_validator

from fincore.app.utils.decimal_utils import ONE, to_decimal
from fincore.app.utils.validation_utils import parse_positive

# =============================================================================
# CRYPTOCURRENCY SUPPORT
# =============================================================================

# Cryptocurrencies not in pycountry ISO 4217 database
CRYPTO_CURRENCIES = {
    "BTC": "Bitcoin",
    "ETH": "Ethereum",
    "USDT": "Tether",
    "USDC": "USD Coin",
    "BNB": "Binance Coin",
    "XRP": "Ripple",
    "ADA": "Cardano",
    "SOL": "Solana",
    "DOT": "Polkadot",
    "DOGE": "Dogecoin",
    "AVAX": "Avalanche",
    "LINK": "Chainlink",
    "LTC": "Litecoin",
    "XLM": "Stellar",
    }


# =============================================================================
# CURRENCY CLASS
# =============================================================================

class Currency(BaseModel):
    """
    Money amount tagged with a validated currency code.

    Codes are checked against ISO 4217 (via pycountry) + crypto dict.
    Amount can be negative.

    Example:
        >>> str(Currency(code="czk", amount="100.50"))
        '100.50 CZK'

    Raises:
        ValueError: If currency code is not valid ISO 4217 or supported crypto
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str = Field(..., description="ISO 4217 currency code or crypto symbol")
    amount: Decimal = Field(..., description="Amount (can be negative)")

    @staticmethod
    def validate_code(v: Any) -> str:
        """
        Validate and normalize a currency code (static method).

        Use this method in Pydantic @field_validator for currency code fields
        that don't need a full Currency object.

        Args:
            v: Currency code to validate

        Returns:
            Uppercase validated currency code

        Raises:
            ValueError: If currency code is invalid

        Example:
            @field_validator('currency')
            @classmethod
            def validate_currency(cls, v):
                return Currency.validate_code(v)
        """
        if not isinstance(v, str):
            raise ValueError(f"Currency code must be a string, got {type(v)}")

        code = v.upper().strip()

        if not code:
            raise ValueError("Currency code cannot be empty")

        if code in CRYPTO_CURRENCIES:
            return code

        # ISO 4217 via pycountry (lookup() would also match names, so check the alpha code explicitly)
        if pycountry.currencies.get(alpha_3=code) is not None:
            return code

        raise ValueError(
            f"Invalid currency code: '{code}'. "
            f"Must be ISO 4217 currency or supported crypto."
            )

    @field_validator('code', mode='before')
    @classmethod
    def validate_currency_code(cls, v: Any) -> str:
        """Validate and normalize currency code."""
        return cls.validate_code(v)

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount(cls, v: Any) -> Decimal:
        """Convert amount to Decimal if needed."""
        return to_decimal(v)

    def __str__(self) -> str:
        """String representation: '100.50 USD'."""
        return f"{self.amount} {self.code}"


# =============================================================================
# EXCHANGE RATE TABLE
# =============================================================================

class ExchangeRateTable(BaseModel):
    """
    Immutable snapshot of exchange rates relative to one base currency.

    Rate semantics: rates[code] = units of `code` per ONE unit of base currency.
    Converting FROM base multiplies by the rate, converting TO base divides.

    Invariants:
        - base_currency always maps to exactly 1 (added when missing)
        - every rate is strictly positive
        - rates is a read-only mapping; use with_rates() to get a new snapshot

    Example:
        >>> table = ExchangeRateTable(base_currency="CZK", rates={"EUR": "0.04", "USD": "0.043"})
        >>> table.rates["CZK"]
        Decimal("1")
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_currency: str = Field(..., description="Reference currency, always at rate 1")
    rates: Mapping[str, Decimal] = Field(default_factory=dict, description="Units of currency per 1 base unit")

    @model_validator(mode='before')
    @classmethod
    def normalize_rates(cls, data: Any) -> Any:
        """Normalize codes, coerce rates to positive Decimals and pin the base at 1."""
        if not isinstance(data, dict):
            return data

        base = Currency.validate_code(data.get("base_currency"))
        raw_rates = data.get("rates") or {}
        if not isinstance(raw_rates, Mapping):
            raise ValueError(f"rates must be a mapping, got {type(raw_rates)}")

        rates: Dict[str, Decimal] = {}
        for raw_code, raw_rate in raw_rates.items():
            code = Currency.validate_code(raw_code)
            if code in rates:
                raise ValueError(f"Duplicate rate for currency {code}")
            rates[code] = parse_positive(raw_rate, f"Rate for {code}")

        if base in rates and rates[base] != ONE:
            raise ValueError(f"Base currency {base} must map to 1 (got {rates[base]})")
        rates[base] = ONE

        return {**data, "base_currency": base, "rates": rates}

    @field_validator('rates', mode='after')
    @classmethod
    def freeze_rates(cls, v: Mapping[str, Decimal]) -> Mapping[str, Decimal]:
        """Expose rates as a read-only view; item assignment raises TypeError."""
        return MappingProxyType(dict(v))

    @field_serializer('rates')
    def serialize_rates(self, v: Mapping[str, Decimal]) -> Dict[str, Decimal]:
        return dict(v)

    @classmethod
    def from_rates(cls, rates: Mapping[str, Any], base_currency: Optional[str] = None) -> 'ExchangeRateTable':
        """
        Build a table, defaulting the base currency to Settings.BASE_CURRENCY.
        """
        if base_currency is None:
            from fincore.app.config import get_settings
            base_currency = get_settings().BASE_CURRENCY
        return cls(base_currency=base_currency, rates=dict(rates))

    def with_rates(self, rates: Mapping[str, Any]) -> 'ExchangeRateTable':
        """
        Return a NEW table with the same base and exactly the given rates.

        Refreshing replaces the whole table: currencies missing from `rates`
        are not carried over from the current snapshot.
        """
        return ExchangeRateTable(base_currency=self.base_currency, rates=dict(rates))

    def currencies(self) -> List[str]:
        """Sorted list of currency codes in the table (base included)."""
        return sorted(self.rates.keys())

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip().upper() in self.rates
