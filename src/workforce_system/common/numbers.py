from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 2) -> float:
    """Round like a calculator does (0.125 -> 0.13), not banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def as_float(value, default: float = 0.0) -> float:
    """Coerce numeric backend columns (which may arrive as str/None) to float."""
    if value is None or value == "":
        return default
    return float(value)


def percentage(value: float, total: float) -> int:
    """Whole-number percentage of value over total; 0 when total is 0."""
    if not total:
        return 0
    return round_int(value / total * 100)
