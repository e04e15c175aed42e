"""
Test suite for amounts module

All monetary calculations must use Decimal precision.
"""

import pytest
from decimal import Decimal

from banking_sim.amounts import (
    to_amount, quantize_amount, decimal_from_string, format_amount
)
from banking_sim.errors import InvalidAmountError


class TestToAmount:
    """Test coercion of caller-supplied amounts"""

    def test_decimal_passthrough_is_exact(self):
        assert to_amount(Decimal('100.555')) == Decimal('100.555')
        assert to_amount(Decimal('0.004')) == Decimal('0.004')

    def test_float_goes_through_string(self):
        """Test that binary float noise does not leak into balances"""
        assert to_amount(0.1) + to_amount(0.2) == Decimal('0.3')

    def test_int_and_string(self):
        assert to_amount(5) == Decimal('5')
        assert to_amount("12.3") == Decimal('12.3')

    def test_quantize_amount(self):
        assert quantize_amount(Decimal('100.7'), 0) == Decimal('101')
        assert quantize_amount(Decimal('100.555')) == Decimal('100.56')
        assert quantize_amount(Decimal('1.23456'), 4) == Decimal('1.2346')

    def test_invalid_values(self):
        for value in ("twelve", "", None, "NaN", float('inf'), False):
            with pytest.raises(InvalidAmountError):
                to_amount(value)

    def test_negative_values_are_not_rejected_here(self):
        """Sign checks belong to the operations, not to coercion"""
        assert to_amount("-3.5") == Decimal('-3.5')


class TestDecimalFromString:
    """Test parsing of typed amounts"""

    def test_plain_numbers(self):
        assert decimal_from_string("100") == Decimal('100')
        assert decimal_from_string("100.50") == Decimal('100.50')
        assert decimal_from_string(" -20.5 ") == Decimal('-20.5')
        assert decimal_from_string(".5") == Decimal('0.5')

    def test_currency_symbols_and_separators(self):
        assert decimal_from_string("$1,250.75") == Decimal('1250.75')
        assert decimal_from_string("$ 12,345,678") == Decimal('12345678')
        assert decimal_from_string("₦1,250", symbols=("₦",)) == Decimal('1250')

    def test_unknown_symbol_rejected(self):
        with pytest.raises(ValueError):
            decimal_from_string("₦1,250")

    def test_invalid_strings(self):
        for value in ("", "abc", "1.2.3", "--5", "1e3", "12abc34", "10,5", "1,2345", "$", "5$"):
            with pytest.raises(ValueError):
                decimal_from_string(value)

    def test_exponent_is_not_read_as_digits(self):
        """Test that stray characters are rejected rather than stripped"""
        with pytest.raises(ValueError, match="1e3"):
            decimal_from_string("1e3")
        with pytest.raises(ValueError, match="12abc34"):
            decimal_from_string("12abc34")

    def test_non_string_rejected(self):
        with pytest.raises(ValueError, match="non-empty string"):
            decimal_from_string(100)


class TestFormatAmount:

    def test_default_format(self):
        assert format_amount(Decimal('1250.5')) == "$1250.50"

    def test_symbol_and_precision(self):
        assert format_amount(Decimal('300'), "₦") == "₦300.00"
        assert format_amount(Decimal('101'), "¥", 0) == "¥101"

    def test_rounds_for_display_only(self):
        amount = Decimal('10.105')
        assert format_amount(amount) == "$10.11"
        assert amount == Decimal('10.105')
