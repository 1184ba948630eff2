"""Randomized fundamentals used when live data is off or unavailable."""

from typing import Iterable, List, Optional

from ...core.models import DataOrigin, StockFundamentals
from ...core.random_source import RandomSource, resolve_random_source
from .universe import company_name, default_tickers, sector_for


def random_between(rng: RandomSource, low: float, high: float, decimals: int = 2) -> float:
    return round(rng.uniform(low, high), decimals)


def generate_mock_fundamentals(
    ticker: str, rng: Optional[RandomSource] = None
) -> StockFundamentals:
    """One mock record drawn from plausible large-cap ranges."""
    rng = resolve_random_source(rng)

    close = random_between(rng, 50, 500)
    market_cap = random_between(rng, 10e9, 3000e9)
    volume = random_between(rng, 500_000, 50_000_000)
    average_volume = random_between(rng, 400_000, 45_000_000)
    pe_ratio = random_between(rng, 8, 80)
    roe = random_between(rng, -5, 40)
    debt_to_equity = random_between(rng, 0, 3)
    revenue_growth = random_between(rng, -10, 50)
    eps_growth = random_between(rng, -20, 80)
    beta = random_between(rng, 0.3, 3.0)
    rsi = random_between(rng, 20, 80)
    recommendation = random_between(rng, 1, 5)
    target_delta = random_between(rng, -5, 40)

    return StockFundamentals(
        ticker=ticker,
        name=company_name(ticker),
        sector=sector_for(ticker),
        close=close,
        volume=volume,
        average_volume_10d=average_volume,
        market_cap=market_cap,
        pe_ratio=pe_ratio,
        roe=roe,
        debt_to_equity=debt_to_equity,
        revenue_growth=revenue_growth,
        eps_growth=eps_growth,
        beta=beta,
        rsi=rsi,
        recommendation_mark=recommendation,
        price_target=close * (1 + target_delta / 100),
        price_target_delta=target_delta,
        data_source=DataOrigin.MOCK,
        data_quality="low",
    )


def generate_market_data(
    tickers: Optional[Iterable[str]] = None, rng: Optional[RandomSource] = None
) -> List[StockFundamentals]:
    """Mock records for ``tickers`` (the default universe when omitted)."""
    rng = resolve_random_source(rng)
    return [
        generate_mock_fundamentals(ticker, rng)
        for ticker in (tickers if tickers is not None else default_tickers())
    ]


def generate_fallback_fundamentals(
    ticker: str, rng: Optional[RandomSource] = None
) -> StockFundamentals:
    """
    Placeholder record for a ticker whose live fetch failed.

    Ranges are slightly narrower than the mock universe; the record is
    tagged ``fallback`` so callers can tell it apart from live data.
    """
    rng = resolve_random_source(rng)

    close = rng.uniform(50, 450)
    target_delta = rng.uniform(-10, 30)

    return StockFundamentals(
        ticker=ticker,
        name=f"{ticker} Corporation",
        sector=sector_for(ticker),
        close=close,
        market_cap=rng.uniform(10e9, 2010e9),
        volume=rng.uniform(1e6, 41e6),
        average_volume_10d=rng.uniform(1e6, 36e6),
        pe_ratio=rng.uniform(10, 70),
        roe=rng.uniform(-5, 35),
        debt_to_equity=rng.uniform(0, 3),
        revenue_growth=rng.uniform(-10, 40),
        eps_growth=rng.uniform(-20, 60),
        beta=rng.uniform(0.3, 2.8),
        rsi=rng.uniform(20, 80),
        recommendation_mark=rng.uniform(1, 4),
        price_target=close * (1 + target_delta / 100),
        price_target_delta=target_delta,
        data_source=DataOrigin.FALLBACK,
        data_quality="low",
    )
