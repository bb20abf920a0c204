"""
Integer rounding used for every displayed percentage, hour count and SM-2
interval.

Python's round() sends halves to the nearest even integer (round(2.5) == 2);
the numbers users see round halves up instead (2.5 → 3, 12.5 → 13).
"""

import math


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
