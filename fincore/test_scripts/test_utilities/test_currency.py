"""
Tests for Currency class in common.py.

Tests cover:
- Currency creation with valid ISO 4217 codes and crypto symbols
- Invalid currency code rejection
- Equality and string form
"""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from fincore.app.schemas.common import Currency, CRYPTO_CURRENCIES


class TestCurrencyCreation:
    """Test Currency object creation."""

    def test_create_czk(self):
        czk = Currency(code="CZK", amount=Decimal("100.50"))
        assert czk.code == "CZK"
        assert czk.amount == Decimal("100.50")

    def test_create_normalizes_code(self):
        """Currency code is trimmed and upper-cased."""
        assert Currency(code="  usd ", amount=1).code == "USD"

    def test_amount_from_float_and_string(self):
        assert Currency(code="EUR", amount=0.1).amount == Decimal("0.1")
        assert Currency(code="EUR", amount="-5").amount == Decimal("-5")

    @pytest.mark.parametrize("code", sorted(CRYPTO_CURRENCIES))
    def test_create_crypto(self, code):
        assert Currency(code=code.lower(), amount=1).code == code

    @pytest.mark.parametrize("code", ["XXXX", "ABC", "", "Euro"])
    def test_invalid_code_rejected(self, code):
        with pytest.raises(ValidationError):
            Currency(code=code, amount=1)

    def test_non_string_code_rejected(self):
        with pytest.raises(ValidationError):
            Currency(code=978, amount=1)

    def test_is_frozen(self):
        usd = Currency(code="USD", amount=1)
        with pytest.raises(ValidationError):
            usd.amount = Decimal("2")


class TestCurrencyEquality:

    def test_equality_requires_same_code(self):
        assert Currency(code="USD", amount=1) == Currency(code="usd", amount=Decimal("1"))
        assert Currency(code="USD", amount=1) != Currency(code="EUR", amount=1)
        assert Currency(code="USD", amount=1) != 1

    def test_str(self):
        assert str(Currency(code="USD", amount=Decimal("100.50"))) == "100.50 USD"
