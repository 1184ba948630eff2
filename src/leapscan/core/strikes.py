"""Strike ladder spanning 50%-200% of spot."""

import math
from typing import List

from .exceptions import InvalidInputError

MAX_STRIKES = 30
LOWER_BOUND_PCT = 0.5
UPPER_BOUND_PCT = 2.0

# (exclusive upper price bound, strike interval)
STRIKE_TIERS = (
    (25, 2.5),
    (50, 5.0),
    (200, 10.0),
    (500, 25.0),
)
TOP_TIER_INTERVAL = 50.0


def strike_interval(spot: float) -> float:
    """Strike spacing for a given underlying price tier."""
    for upper_bound, interval in STRIKE_TIERS:
        if spot < upper_bound:
            return interval
    return TOP_TIER_INTERVAL


def generate_strikes(spot: float) -> List[float]:
    """
    Build an ascending strike ladder around ``spot``.

    The ladder runs from floor(spot*0.5) to ceil(spot*2.0), both snapped to
    the tier interval, drops non-positive strikes and keeps the first 30.
    """
    if spot is None or not math.isfinite(spot) or spot <= 0:
        raise InvalidInputError("spot", spot, "spot must be a positive number")

    interval = strike_interval(spot)
    first_step = math.floor(spot * LOWER_BOUND_PCT / interval)
    last_step = math.ceil(spot * UPPER_BOUND_PCT / interval)

    strikes = []
    for step in range(first_step, last_step + 1):
        strike = round(step * interval, 2)
        if strike > 0:
            strikes.append(strike)
        if len(strikes) == MAX_STRIKES:
            break

    return strikes
