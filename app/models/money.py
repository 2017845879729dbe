from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

TWOPLACES = Decimal("0.01")


def as_decimal(value: Decimal | float | int | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as Decimal("0.1") instead of its binary expansion.
    return Decimal(str(value))


def amount_for(shares: float, price: Decimal) -> Decimal:
    """Cash value of ``shares`` at ``price``, rounded half-up to cents."""
    return (as_decimal(shares) * as_decimal(price)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
