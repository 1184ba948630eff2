"""Synthetic option quotes with heuristic Greeks.

This is not a Black-Scholes pricer. Time value decays exponentially with
distance from the money and implied volatility is sampled, so quotes are
internally consistent but not market-accurate.
"""

import math
from typing import Optional, Union

from .exceptions import InvalidInputError
from .models import UNLIMITED, Moneyness, OptionQuote, OptionType
from .normal import normal_cdf
from .random_source import RandomSource, resolve_random_source


DAYS_PER_YEAR = 365

IV_MIN = 0.25
IV_MAX = 0.55
SPREAD_MIN_PCT = 0.02
SPREAD_MAX_PCT = 0.05
MIN_BID = 0.05
VOLUME_RANGE = (10, 1010)
OPEN_INTEREST_RANGE = (100, 10100)

ITM_THRESHOLD = 0.95


def _require_positive(field: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(field, value)
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(field, value, f"'{field}' must be a positive number")
    return number


def parse_option_type(value: Union[OptionType, str]) -> OptionType:
    try:
        return OptionType(str(getattr(value, "value", value)).lower())
    except ValueError:
        raise InvalidInputError(
            "option_type", value, "option_type must be 'call' or 'put'"
        )


def validate_days_to_expiry(days_to_expiry: int) -> int:
    if isinstance(days_to_expiry, bool) or days_to_expiry is None:
        raise InvalidInputError("days_to_expiry", days_to_expiry)
    if isinstance(days_to_expiry, float):
        if not days_to_expiry.is_integer():
            raise InvalidInputError(
                "days_to_expiry", days_to_expiry, "days_to_expiry must be an integer"
            )
        days_to_expiry = int(days_to_expiry)
    if days_to_expiry < 1:
        raise InvalidInputError(
            "days_to_expiry", days_to_expiry, "days_to_expiry must be at least 1"
        )
    return days_to_expiry


def intrinsic_value(option_type: OptionType, strike: float, spot: float) -> float:
    if option_type is OptionType.CALL:
        return max(spot - strike, 0.0)
    return max(strike - spot, 0.0)


def calculate_time_value(
    moneyness: float, time_to_expiry: float, volatility: float
) -> float:
    """Time value shrinking with distance from the money."""
    distance = abs(moneyness - 1)
    return 0.4 * math.sqrt(time_to_expiry) * volatility * 100 * math.exp(-distance * 2)


def calculate_delta(
    option_type: OptionType, moneyness: float, time_to_expiry: float, volatility: float
) -> float:
    d1 = (math.log(1 / moneyness) + 0.5 * volatility * volatility * time_to_expiry) / (
        volatility * math.sqrt(time_to_expiry)
    )
    call_delta = normal_cdf(d1)
    return call_delta if option_type is OptionType.CALL else call_delta - 1


def calculate_gamma(moneyness: float, time_to_expiry: float, volatility: float) -> float:
    return math.exp(-(math.log(moneyness) ** 2) / 2) / (
        volatility * math.sqrt(2 * math.pi * time_to_expiry)
    )


def calculate_theta(time_value: float, days_to_expiry: int) -> float:
    """Linear daily decay of the time value."""
    return -time_value / days_to_expiry


def calculate_vega(time_to_expiry: float) -> float:
    return math.sqrt(time_to_expiry) * 0.1


def calculate_annualized_return(
    option_price: float, spot: float, time_to_expiry: float
) -> float:
    """Leverage-style return treating the premium as a fraction of spot.

    A premium that rounds to zero has no defined leverage and reports 0.0.
    """
    if option_price <= 0:
        return 0.0
    return ((spot / option_price) - 1) / time_to_expiry


def classify_moneyness(option_type: OptionType, strike: float, spot: float) -> Moneyness:
    """Classify with ratio > 1 as OTM and ratio < 0.95 as ITM.

    Calls use strike/spot, puts use spot/strike so a put struck above
    spot reads as ITM.
    """
    ratio = strike / spot if option_type is OptionType.CALL else spot / strike
    if ratio > 1:
        return Moneyness.OTM
    if ratio < ITM_THRESHOLD:
        return Moneyness.ITM
    return Moneyness.ATM


class OptionPricer:
    """Builds ``OptionQuote`` objects from an injected random source."""

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng = resolve_random_source(rng)

    def price(
        self,
        option_type: Union[OptionType, str],
        strike: float,
        spot: float,
        days_to_expiry: int,
    ) -> OptionQuote:
        """
        Price a single option.

        Args:
            option_type: 'call' or 'put'
            strike: Strike price, must be positive
            spot: Underlying price, must be positive
            days_to_expiry: Whole days to expiration, at least 1

        Returns:
            OptionQuote with mid = intrinsic + time value

        Raises:
            InvalidInputError: If any input is out of range
        """
        option_type = parse_option_type(option_type)
        strike = _require_positive("strike", strike)
        spot = _require_positive("spot", spot)
        days_to_expiry = validate_days_to_expiry(days_to_expiry)

        time_to_expiry = days_to_expiry / DAYS_PER_YEAR
        volatility = self.rng.uniform(IV_MIN, IV_MAX)
        moneyness = strike / spot

        intrinsic = intrinsic_value(option_type, strike, spot)
        time_value = calculate_time_value(moneyness, time_to_expiry, volatility)
        mid = intrinsic + time_value

        delta = calculate_delta(option_type, moneyness, time_to_expiry, volatility)
        gamma = calculate_gamma(moneyness, time_to_expiry, volatility)
        theta = calculate_theta(time_value, days_to_expiry)
        vega = calculate_vega(time_to_expiry)

        spread = mid * self.rng.uniform(SPREAD_MIN_PCT, SPREAD_MAX_PCT)
        # The nickel floor wins over bid <= mid for sub-nickel premiums
        bid = max(mid - spread / 2, MIN_BID)
        ask = max(mid + spread / 2, bid)
        volume = self.rng.randint(*VOLUME_RANGE)
        open_interest = self.rng.randint(*OPEN_INTEREST_RANGE)

        if option_type is OptionType.CALL:
            breakeven = strike + mid
            max_gain = UNLIMITED
        else:
            breakeven = strike - mid
            max_gain = strike - mid

        return OptionQuote(
            option_type=option_type,
            strike=strike,
            bid=bid,
            ask=ask,
            mid_price=mid,
            volume=volume,
            open_interest=open_interest,
            implied_volatility=volatility,
            delta=delta,
            gamma=gamma,
            theta=theta,
            vega=vega,
            intrinsic_value=intrinsic,
            time_value=time_value,
            moneyness=classify_moneyness(option_type, strike, spot),
            breakeven=breakeven,
            max_loss=mid,
            max_gain=max_gain,
            annualized_return=calculate_annualized_return(mid, spot, time_to_expiry),
        )


def price_option(
    option_type: Union[OptionType, str],
    strike: float,
    spot: float,
    days_to_expiry: int,
    rng: Optional[RandomSource] = None,
) -> OptionQuote:
    """Convenience wrapper around ``OptionPricer.price``."""
    return OptionPricer(rng).price(option_type, strike, spot, days_to_expiry)
