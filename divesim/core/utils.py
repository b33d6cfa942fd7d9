"""
Shared utility functions for DiveSim.
"""

import math
from typing import Optional


def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp value to the inclusive range [low, high].
    """
    if low > high:
        low, high = high, low
    return max(low, min(high, value))


def coerce_number(value) -> float:
    """
    Return value as a finite float, treating None/NaN/garbage as zero.

    Physics formulas assume clean inputs; callers coerce before invoking.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_number(raw) -> Optional[float]:
    """
    Parse operator input (number or text) into a float.

    Returns None for empty, non-numeric or non-finite input.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def round_to(value: float, decimals: int) -> float:
    """Round half away from zero so displayed values do not flicker."""
    scale = 10 ** decimals
    return math.floor(abs(value) * scale + 0.5) / scale * (1 if value >= 0 else -1)
