"""
Monetary Amount Module

Decimal helpers for balances and transaction amounts. NEVER uses float for
monetary values: anything that is not already a Decimal is converted through
its string form. Amounts are kept exact; rounding happens only for display.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from typing import Iterable
import re

from .errors import InvalidAmountError

# Set global decimal context for financial precision
getcontext().prec = 28

ZERO = Decimal('0')
DEFAULT_PRECISION = 2

_PLAIN_NUMBER = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)$')
_THOUSANDS_GROUPED = re.compile(r'^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$')


def quantize_amount(value: Decimal, precision: int = DEFAULT_PRECISION) -> Decimal:
    """Round a Decimal to ``precision`` places using ROUND_HALF_UP"""
    return value.quantize(Decimal('0.1') ** precision, rounding=ROUND_HALF_UP)


def to_amount(value) -> Decimal:
    """
    Coerce a caller-supplied amount to an exact Decimal

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Decimal with the same value, never rounded

    Raises:
        InvalidAmountError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InvalidAmountError(f"Invalid amount: {value!r}")

    if not value.is_finite():
        raise InvalidAmountError(f"Invalid amount: {value}")

    return value


def decimal_from_string(value: str, symbols: Iterable[str] = ("$",)) -> Decimal:
    """
    Convert a typed amount to Decimal

    Accepts surrounding whitespace, a leading currency symbol from
    ``symbols`` and comma thousands separators in groups of three, e.g.
    "$1,250.50". Anything else must be a plain decimal number.

    Raises:
        ValueError: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    clean_value = value.strip()
    for symbol in symbols:
        if symbol and clean_value.startswith(symbol):
            clean_value = clean_value[len(symbol):].lstrip()
            break

    if _THOUSANDS_GROUPED.match(clean_value):
        clean_value = clean_value.replace(',', '')

    if not _PLAIN_NUMBER.match(clean_value):
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    return Decimal(clean_value)


def format_amount(amount: Decimal, symbol: str = "$",
                  precision: int = DEFAULT_PRECISION) -> str:
    """Format for display, e.g. ``$1250.50``"""
    return f"{symbol}{quantize_amount(amount, precision):.{precision}f}"
