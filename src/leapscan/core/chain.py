"""Options chain synthesis over a strike ladder."""

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Sequence, Union

from ..config.logging import get_logger
from .exceptions import InvalidInputError
from .expirations import select_or_default, utc_now
from .models import ChainProvenance, ChainRow, LeapsChainSet, OptionsChain, OptionType
from .pricer import OptionPricer
from .random_source import RandomSource, resolve_random_source
from .strikes import generate_strikes

logger = get_logger(__name__)

FALLBACK_SPOT_MIN = 50.0
FALLBACK_SPOT_MAX = 450.0
SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class SpotPrice:
    """Underlying price and whether it was a random placeholder."""

    price: float
    is_fallback: bool = False


SpotSource = Union[float, int, SpotPrice, Mapping[str, Any], Sequence[Any], None]


def _quoted_price(raw: Any) -> Optional[float]:
    if not isinstance(raw, Mapping):
        return None
    quote = raw.get("quote")
    if not isinstance(quote, Mapping):
        return None
    price = quote.get("regularMarketPrice")
    try:
        price = float(price)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def resolve_spot_price(
    raw: Any, rng: Optional[RandomSource] = None, ticker: Optional[str] = None
) -> SpotPrice:
    """
    Read ``quote.regularMarketPrice`` from a raw blob.

    When absent a price in [50, 450] is drawn and flagged as a fallback so
    callers can tell the screen ran on a placeholder.
    """
    price = _quoted_price(raw)
    if price is not None:
        return SpotPrice(price)

    price = resolve_random_source(rng).uniform(FALLBACK_SPOT_MIN, FALLBACK_SPOT_MAX)
    logger.warning("spot_price_fallback", ticker=ticker, price=round(price, 2))
    return SpotPrice(price, is_fallback=True)


def _as_spot(spot_source: SpotSource, rng: Optional[RandomSource], ticker: str) -> SpotPrice:
    if isinstance(spot_source, SpotPrice):
        return spot_source
    if isinstance(spot_source, (int, float)) and not isinstance(spot_source, bool):
        return SpotPrice(float(spot_source))
    return resolve_spot_price(spot_source, rng, ticker)


def _as_utc_datetime(expiration: Union[date, datetime]) -> datetime:
    if isinstance(expiration, datetime):
        return utc_now(expiration)
    return datetime(expiration.year, expiration.month, expiration.day, tzinfo=timezone.utc)


def days_to_expiry(
    expiration: Union[date, datetime], now: Optional[datetime] = None
) -> int:
    """Whole days until expiration, rounded up."""
    delta = _as_utc_datetime(expiration) - utc_now(now)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def find_atm_strike(strikes: Sequence[float], spot: float) -> float:
    """Strike closest to spot; on a tie the first one in ladder order wins."""
    if not strikes:
        raise InvalidInputError("strikes", strikes, "strike ladder is empty")

    best = strikes[0]
    for strike in strikes[1:]:
        if abs(strike - spot) < abs(best - spot):
            best = strike
    return best


def build_chain(
    ticker: str,
    expiration: Union[date, datetime],
    spot_source: SpotSource,
    rng: Optional[RandomSource] = None,
    now: Optional[datetime] = None,
) -> OptionsChain:
    """
    Synthesize a call and a put for every strike of the ladder.

    Args:
        ticker: Underlying symbol
        expiration: Expiration date (dates are read as midnight UTC)
        spot_source: Spot price, SpotPrice, or raw blob carrying a quote
        rng: Random source for the quote samplers
        now: Clock override

    Raises:
        InvalidInputError: If the expiration is less than one day away
    """
    rng = resolve_random_source(rng)
    spot = _as_spot(spot_source, rng, ticker)

    days = days_to_expiry(expiration, now)
    if days < 1:
        raise InvalidInputError(
            "days_to_expiry", days, f"expiration {expiration} is not in the future"
        )

    strikes = generate_strikes(spot.price)
    pricer = OptionPricer(rng)
    rows = tuple(
        ChainRow(
            strike=strike,
            call=pricer.price(OptionType.CALL, strike, spot.price, days),
            put=pricer.price(OptionType.PUT, strike, spot.price, days),
        )
        for strike in strikes
    )

    return OptionsChain(
        ticker=ticker,
        expiration=_as_utc_datetime(expiration).date(),
        days_to_expiry=days,
        spot_price=spot.price,
        strikes=tuple(strikes),
        atm_strike=find_atm_strike(strikes, spot.price),
        rows=rows,
    )


def infer_provenance(raw: Any) -> ChainProvenance:
    if isinstance(raw, list):
        return ChainProvenance.POLYGON
    if isinstance(raw, Mapping) and ("expirationDates" in raw or "options" in raw):
        return ChainProvenance.YAHOO
    return ChainProvenance.MOCK


def build_leaps_chain_set(
    ticker: str,
    raw: Any,
    provenance: Optional[ChainProvenance] = None,
    spot: Optional[SpotPrice] = None,
    rng: Optional[RandomSource] = None,
    now: Optional[datetime] = None,
) -> LeapsChainSet:
    """
    Build up to four LEAPS chains for ``ticker`` from a raw options blob.

    The spot price is resolved once and shared by every chain. When the
    expirations had to be synthesized the set is tagged ``mock``.
    """
    rng = resolve_random_source(rng)
    now = utc_now(now)

    selection = select_or_default(raw, now)
    if spot is None:
        spot = resolve_spot_price(raw, rng, ticker)

    if selection.is_fallback:
        provenance = ChainProvenance.MOCK
    elif provenance is None:
        provenance = infer_provenance(raw)

    chains = tuple(
        build_chain(ticker, expiration, spot, rng=rng, now=now)
        for expiration in selection.expirations
    )

    logger.debug(
        "Built LEAPS chain set",
        ticker=ticker,
        provenance=provenance.value,
        expirations=len(chains),
        spot_is_fallback=spot.is_fallback,
    )

    return LeapsChainSet(
        ticker=ticker,
        generated_at=now,
        provenance=provenance,
        spot_price=spot.price,
        spot_is_fallback=spot.is_fallback,
        chains=chains,
    )
