"""Small numeric helpers shared across the package."""

import math


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round with halves going up (2.25 -> 2.3), unlike Python's round()."""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor
