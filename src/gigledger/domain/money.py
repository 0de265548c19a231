"""Exact monetary amounts.

All balances and prices are ``Decimal`` values quantized to cents.
Binary floats are rejected outright: a float has already lost precision
by the time it reaches us.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_amount(value: Decimal | int | str) -> Decimal:
    """Coerce *value* to a cent-quantized ``Decimal``.

    Raises:
        ValueError: If *value* is a float, not a finite number, or carries
            sub-cent precision.
    """
    if isinstance(value, bool) or isinstance(value, float):
        msg = f"Monetary amounts must not be {type(value).__name__}: {value!r}"
        raise ValueError(msg)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        msg = f"Not a monetary amount: {value!r}"
        raise ValueError(msg) from exc
    if not amount.is_finite():
        msg = f"Not a finite amount: {value!r}"
        raise ValueError(msg)
    quantized = amount.quantize(CENT, rounding=ROUND_HALF_EVEN)
    if quantized != amount:
        msg = f"Amount has sub-cent precision: {value!r}"
        raise ValueError(msg)
    return quantized


def to_cents(amount: Decimal) -> int:
    """Convert a quantized amount to integer minor units."""
    return int(to_amount(amount) * 100)


def from_cents(cents: int) -> Decimal:
    """Convert integer minor units back to a quantized amount."""
    return (Decimal(cents) / 100).quantize(CENT)
