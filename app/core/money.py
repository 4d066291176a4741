from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

# Currency precision (cents)
CENT = Decimal("0.01")

ZERO = Decimal("0")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Coerce a stored amount to a Decimal without float drift.

    Floats go through ``str`` first so 0.1 becomes Decimal("0.1") rather
    than its binary expansion. None and unparseable values map to ``default``.
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_float(value: Decimal) -> float:
    """Round to cents and hand back a float for JSON responses."""
    return float(round_money(value))
