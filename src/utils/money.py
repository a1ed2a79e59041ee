"""
Integer-cent money helpers.

Vendor feeds report money in cents; every amount stays an int so totals never
pick up floating point drift.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, Decimal, str]


def divide_cents(total_cents: int, quantity: Number) -> int:
    """Per-unit price in cents, rounded half up. A zero quantity returns the total."""
    qty = Decimal(str(quantity))
    if qty == 0:
        return total_cents
    return int((Decimal(total_cents) / qty).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
