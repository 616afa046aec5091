"""Unit tests for the ISO 4217 registry."""

import pytest

from ledger_kernel.domain.currency import CurrencyRegistry
from ledger_kernel.domain.money import Currency
from ledger_kernel.exceptions import InvalidCurrencyError


class TestCurrencyRegistry:
    @pytest.mark.parametrize(
        "code, places",
        [("USD", 2), ("EUR", 2), ("JPY", 0), ("KRW", 0), ("KWD", 3), ("BHD", 3), ("CLF", 4)],
    )
    def test_decimal_places(self, code, places):
        assert CurrencyRegistry.get_decimal_places(code) == places

    def test_validate_normalizes(self):
        assert CurrencyRegistry.validate(" usd ") == "USD"

    def test_unknown_code(self):
        assert not CurrencyRegistry.is_valid("ABC")
        assert CurrencyRegistry.get_info("ABC") is None
        with pytest.raises(InvalidCurrencyError) as exc_info:
            CurrencyRegistry.require("ABC")
        assert exc_info.value.code == "INVALID_CURRENCY"

    def test_invalid_currency_is_value_error(self):
        with pytest.raises(ValueError):
            Currency("NOPE")

    def test_non_string_is_invalid(self):
        assert not CurrencyRegistry.is_valid(None)

    def test_all_codes(self):
        codes = CurrencyRegistry.all_codes()
        assert {"USD", "EUR", "JPY"} <= codes


class TestCurrency:
    def test_minor_unit_denominator(self):
        assert Currency("USD").minor_unit_denominator == 100
        assert Currency("JPY").minor_unit_denominator == 1
        assert Currency("KWD").minor_unit_denominator == 1000

    def test_name(self):
        assert Currency("EUR").name == "Euro"

    def test_equality_and_hash(self):
        assert Currency("usd") == Currency("USD")
        assert len({Currency("USD"), Currency("usd")}) == 1
