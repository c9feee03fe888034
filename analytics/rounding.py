"""
analytics/rounding.py

Half-up rounding used for every percentage and euro figure shown to users.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2).

    Unlike the built-in ``round``, ties never go to the even neighbour.
    """

    return int(math.floor(value + 0.5))
