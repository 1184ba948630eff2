"""Fundamentals service: live providers with cached, observable fallbacks."""

import asyncio
import math
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import aiohttp

from ...cache import TTLCache
from ...config.logging import get_logger
from ...config.settings import Settings, get_settings
from ...core.cache_keys import cache_key
from ...core.exceptions import InvalidInputError
from ...core.models import DataOrigin, StockFundamentals, price_target_delta_pct
from ...core.random_source import RandomSource, resolve_random_source
from .client import MarketDataClient
from .mock_generator import generate_fallback_fundamentals, generate_mock_fundamentals
from .models import FundamentalsResult, MarketDataError
from .universe import sector_for

logger = get_logger(__name__)

NEUTRAL_RECOMMENDATION = 2.5

# Alpha Vantage rating buckets mapped onto the 1 (strong buy) .. 5 scale
_RATING_FIELDS = (
    ("AnalystRatingStrongBuy", 1),
    ("AnalystRatingBuy", 2),
    ("AnalystRatingHold", 3),
    ("AnalystRatingSell", 4),
    ("AnalystRatingStrongSell", 5),
)


def _to_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Parse provider numbers, which arrive as strings or 'None'/'-'."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def assess_data_quality(overview: Dict[str, Any], quote: Dict[str, Any]) -> str:
    """Grade a record high/medium/low by how many key fields are present."""
    score = sum(
        25
        for present in (
            overview.get("Name"),
            overview.get("MarketCapitalization"),
            quote.get("price"),
            quote.get("volume"),
        )
        if present
    )
    if score >= 75:
        return "high"
    if score >= 50:
        return "medium"
    return "low"


def recommendation_mark(overview: Dict[str, Any]) -> float:
    """Mean analyst rating on the 1..5 scale, neutral when nobody covers it."""
    total = 0.0
    weighted = 0.0
    for field, mark in _RATING_FIELDS:
        count = _to_float(overview.get(field), 0.0)
        total += count
        weighted += count * mark
    if total <= 0:
        return NEUTRAL_RECOMMENDATION
    return weighted / total


def build_live_fundamentals(
    ticker: str,
    overview: Dict[str, Any],
    quote: Dict[str, Any],
    rsi: Optional[float],
    rng: Optional[RandomSource] = None,
) -> StockFundamentals:
    """
    Map provider payloads onto a ``StockFundamentals`` record.

    Raises:
        MarketDataError: If no usable price was returned
    """
    close = _to_float(quote.get("price") or quote.get("close"))
    if not close or close <= 0:
        raise MarketDataError("twelve_data", f"no price for {ticker}")

    volume = _to_float(quote.get("volume"))
    pe_ratio = _to_float(overview.get("PERatio"), None)
    price_target = _to_float(overview.get("AnalystTargetPrice"))

    if rsi is None:
        rsi = resolve_random_source(rng).uniform(20, 80)
        logger.debug("RSI unavailable, using placeholder", ticker=ticker, rsi=rsi)

    return StockFundamentals(
        ticker=ticker,
        name=overview.get("Name") or f"{ticker} Corporation",
        sector=overview.get("Sector") or sector_for(ticker),
        close=close,
        volume=volume,
        average_volume_10d=_to_float(quote.get("average_volume")) or volume,
        market_cap=_to_float(overview.get("MarketCapitalization")),
        pe_ratio=pe_ratio if pe_ratio and pe_ratio > 0 else None,
        roe=_to_float(overview.get("ReturnOnEquityTTM")) * 100,
        debt_to_equity=_to_float(overview.get("DebtToEquityRatio")),
        revenue_growth=_to_float(overview.get("QuarterlyRevenueGrowthYOY")) * 100,
        eps_growth=_to_float(overview.get("QuarterlyEarningsGrowthYOY")) * 100,
        beta=_to_float(overview.get("Beta"), 1.0),
        rsi=rsi,
        recommendation_mark=recommendation_mark(overview),
        price_target=price_target,
        price_target_delta=price_target_delta_pct(close, price_target),
        data_source=DataOrigin.LIVE,
        data_quality=assess_data_quality(overview, quote),
    )


class MarketDataService:
    """Fetches fundamentals for the screener, one batch at a time."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[MarketDataClient] = None,
        cache: Optional[TTLCache] = None,
        rng: Optional[RandomSource] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self.client = client or MarketDataClient(
            alpha_vantage_key=self.settings.alpha_vantage_api_key,
            twelve_data_key=self.settings.twelve_data_api_key,
            timeout_seconds=self.settings.request_timeout_seconds,
        )
        self.cache = cache or TTLCache(self.settings.market_data_cache_seconds)
        self.rng = resolve_random_source(rng)
        self._sleep = sleep
        self.logger = logger.bind(component="market_data_service")

    @property
    def live_enabled(self) -> bool:
        return self.settings.has_live_market_data()

    def _fallback(self, ticker: str, error: Exception) -> FundamentalsResult:
        self.logger.warning("market_data_fallback", ticker=ticker, error=str(error))
        return FundamentalsResult(
            fundamentals=generate_fallback_fundamentals(ticker, self.rng),
            origin=DataOrigin.FALLBACK,
            error=str(error),
        )

    async def get_stock_data(self, ticker: str) -> FundamentalsResult:
        """
        Fetch live fundamentals for one ticker.

        Overview, quote and RSI are requested concurrently; any of them may
        fail on its own. If the record cannot be built a ``fallback`` result
        carrying the error is returned instead.
        """
        ticker = ticker.upper()
        key = cache_key("stock", ticker, self.settings.market_data_cache_seconds)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        overview, quote, rsi = await asyncio.gather(
            self.client.get_company_overview(ticker),
            self.client.get_quote(ticker),
            self.client.get_rsi(ticker),
            return_exceptions=True,
        )

        if isinstance(quote, Exception):
            return self._fallback(ticker, quote)
        if isinstance(overview, Exception):
            self.logger.info("Overview unavailable", ticker=ticker, error=str(overview))
            overview = {}
        if isinstance(rsi, Exception):
            self.logger.info("RSI unavailable", ticker=ticker, error=str(rsi))
            rsi = None

        try:
            fundamentals = build_live_fundamentals(ticker, overview, quote, rsi, self.rng)
        except (MarketDataError, InvalidInputError) as e:
            return self._fallback(ticker, e)

        result = FundamentalsResult(fundamentals, DataOrigin.LIVE)
        self.cache.set(key, result)
        return result

    async def _get_stock_data_safely(self, ticker: str) -> FundamentalsResult:
        try:
            return await self.get_stock_data(ticker)
        except (MarketDataError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            return self._fallback(ticker.upper(), e)

    async def get_batch_stock_data(self, tickers: Sequence[str]) -> List[FundamentalsResult]:
        """
        Fetch tickers in batches, pausing between batches for provider rate limits.

        Args:
            tickers: Symbols to fetch

        Returns:
            One result per ticker, in input order
        """
        batch_size = self.settings.market_data_batch_size
        delay = self.settings.market_data_batch_delay_seconds
        results: List[FundamentalsResult] = []

        for start in range(0, len(tickers), batch_size):
            batch = tickers[start : start + batch_size]
            results.extend(
                await asyncio.gather(*(self._get_stock_data_safely(t) for t in batch))
            )
            if start + batch_size < len(tickers) and delay > 0:
                self.logger.debug("Waiting between batches", seconds=delay)
                await self._sleep(delay)

        fallbacks = sum(1 for r in results if not r.is_live)
        self.logger.info(
            "Fetched batch fundamentals", total=len(results), fallbacks=fallbacks
        )
        return results

    def get_mock_data(self, tickers: Sequence[str]) -> List[FundamentalsResult]:
        return [
            FundamentalsResult(generate_mock_fundamentals(t, self.rng), DataOrigin.MOCK)
            for t in tickers
        ]

    async def get_universe_data(
        self, tickers: Sequence[str], use_live: bool
    ) -> List[FundamentalsResult]:
        """Live data when requested and configured, otherwise the mock universe."""
        if use_live and self.live_enabled:
            return await self.get_batch_stock_data(tickers)
        if use_live:
            self.logger.info("Live data requested but no provider key configured")
        return self.get_mock_data(tickers)

    def data_source(self, use_live: bool) -> str:
        return DataOrigin.LIVE.value if use_live and self.live_enabled else DataOrigin.MOCK.value
