"""
Money arithmetic helpers.

All cost math runs on Decimal so identical inputs always produce
identical digits.
"""

from decimal import Context, Decimal, ROUND_HALF_UP, localcontext
from typing import Union

CENT = Decimal("0.01")

# Largest magnitude accepted for any input quantity or rate
MAX_AMOUNT = Decimal("1e300")

# Holds the cent-quantized product of four MAX_AMOUNT factors (overhead on staffing)
_MONEY_CONTEXT = Context(prec=2000)


def money_context():
    """Context manager for cost arithmetic; independent of the caller's context."""
    return localcontext(_MONEY_CONTEXT)


def to_decimal(value: Union[int, float, Decimal]) -> Decimal:
    """Convert a number to Decimal via its shortest repr (floats included)."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
