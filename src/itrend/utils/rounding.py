"""itrend.utils.rounding

Banker's rounding (round-half-to-even) at a fixed number of decimals.

Prices and indicator values arrive as binary floats. Rounding goes through
``Decimal(str(x))`` so a value printed as ``1.005`` is treated as the decimal
``1.005`` (tie, rounds to ``1.00``) rather than its binary neighbour.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal
from typing import Union

Number = Union[int, float, Decimal]


def to_decimal(x: Number) -> Decimal:
    if isinstance(x, Decimal):
        return x
    if isinstance(x, float) and x != x:
        raise ValueError("cannot convert NaN to Decimal")
    return Decimal(str(x))


def round_half_even_decimal(x: Number, decimals: int = 2) -> Decimal:
    if decimals < 0:
        raise ValueError("decimals must be non-negative")
    quantum = Decimal(1).scaleb(-int(decimals))
    return to_decimal(x).quantize(quantum, rounding=ROUND_HALF_EVEN)


def round_half_even(x: Number, decimals: int = 2) -> float:
    """Round ``x`` half-to-even and return a float."""

    return float(round_half_even_decimal(x, decimals))


__all__ = ["Number", "to_decimal", "round_half_even_decimal", "round_half_even"]
