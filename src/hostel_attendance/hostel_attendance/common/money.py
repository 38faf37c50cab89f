from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_CENTS = Decimal("0.01")


def round_money(value: float) -> float:
    """Round half-up to 2 decimals, the way amounts are displayed."""
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))
