"""
Decimal helpers shared by every metric source.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

_TWO_PLACES = Decimal("0.01")
_BYTES_PER_MB = Decimal(1024 * 1024)


def round2(value: Union[Decimal, int, float, str]) -> Decimal:
    """Round to two decimal places, half-up."""
    if not isinstance(value, Decimal):
        # Going through str avoids binary float artefacts such as 2.675 -> 2.67.
        value = Decimal(str(value))
    return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def bytes_to_mb(num_bytes: int) -> Decimal:
    """Convert a byte count to megabytes, rounded to two decimals."""
    return round2(Decimal(num_bytes) / _BYTES_PER_MB)
