"""
Decimal arithmetic for ledger amounts.

Gateway amounts are decimal strings with up to 18 fractional digits. Values
are parsed exactly; every arithmetic operation goes through RADIX_CONTEXT
(28 significant digits, half-up) rather than the thread-local decimal context.
"""

from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Iterable, Union

RADIX_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP)

Numeric = Union[str, int, float, Decimal]

_HUNDRED = Decimal(100)
_TWO_PLACES = Decimal('0.01')


def BN(value: Numeric) -> Decimal:
    """
    Create a Decimal from a ledger amount without losing digits.

    Args:
        value: Decimal string, int, float or Decimal

    Returns:
        Decimal: Exact value; rounding happens in arithmetic
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Go through the shortest repr so 0.1 stays 0.1
        value = repr(value)
    return Decimal(value)


def add(a: Numeric, b: Numeric) -> Decimal:
    return RADIX_CONTEXT.add(BN(a), BN(b))


def subtract(a: Numeric, b: Numeric) -> Decimal:
    return RADIX_CONTEXT.subtract(BN(a), BN(b))


def multiply(a: Numeric, b: Numeric) -> Decimal:
    return RADIX_CONTEXT.multiply(BN(a), BN(b))


def divide(a: Numeric, b: Numeric) -> Decimal:
    return RADIX_CONTEXT.divide(BN(a), BN(b))


def decimal_sum(values: Iterable[Numeric]) -> Decimal:
    total = BN(0)
    for value in values:
        total = add(total, value)
    return total


def is_positive(value: Numeric) -> bool:
    return BN(value) > 0


def to_string(value: Numeric) -> str:
    """Render without exponent or trailing zeros, e.g. '301.11111111' or '1000'."""
    d = BN(value)
    if d.is_zero():
        return '0'
    rendered = format(d, 'f')
    if '.' in rendered:
        rendered = rendered.rstrip('0').rstrip('.')
    return rendered


def to_percentage(fraction: Numeric) -> str:
    """Render a fraction like '0.05' as '5.00%'."""
    percentage = multiply(fraction, _HUNDRED).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP, context=RADIX_CONTEXT)
    return f"{percentage}%"
