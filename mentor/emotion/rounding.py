"""Numeric helpers shared by the analyzer and the insight text."""

from decimal import ROUND_HALF_UP, Decimal


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float | int:
    """
    Round halves away from zero, on the exact binary value of the float.

    This is what the extension's popup expects from its stored numbers:
    2.5 -> 3 and 1.005 -> 1.0 (1.005 is really 1.00499...). Python's round()
    would give 2 for the first.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(rounded)
    return float(rounded)
