"""Decimal helpers for monetary values crossing the API boundary.

The remote store sends prices, totals and amounts as strings
(``"2.99"``) and expects them back as strings with two decimals.
Quantities and stock never go through these helpers: they are plain ints.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number | None, default: Decimal = ZERO) -> Decimal:
    """Parse a wire value into a ``Decimal`` quantized to cents.

    ``None`` and empty strings map to *default*.  Floats go through
    ``str()`` so that ``2.99`` does not become ``2.9900000000000002131``.

    Raises:
        ValueError: the value is not a number.
    """
    if value is None or value == "":
        return default
    if isinstance(value, float):
        value = str(value)
    try:
        parsed = Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid monetary value: {value!r}") from exc
    if not parsed.is_finite():
        raise ValueError(f"Invalid monetary value: {value!r}")
    return parsed.quantize(CENT, rounding=ROUND_HALF_UP)


def to_wire(value: Decimal) -> str:
    """Serialize a monetary value the way the remote store expects it."""
    return str(value.quantize(CENT, rounding=ROUND_HALF_UP))
