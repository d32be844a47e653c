"""Numeric coercion and rounding helpers."""

import math
from typing import Any, Optional


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up.

    Python's built-in ``round`` uses banker's rounding (``round(2.5) == 2``);
    stored scores were produced with half-up rounding, so every XP value in
    the engine goes through this helper instead.
    """
    return int(math.floor(value + 0.5))


def coerce_number(value: Any) -> Optional[float]:
    """Parse a loosely-typed numeric field.

    Accepts ints, floats and numeric strings. Returns None for anything that
    is missing, boolean, unparsable, NaN or infinite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number
