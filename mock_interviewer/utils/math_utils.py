"""
Numeric helpers.
"""
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3), unlike ``round``."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
