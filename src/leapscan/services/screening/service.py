"""Main orchestration service for LEAPS screening."""

import asyncio
import time
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ...config.logging import get_logger, log_performance
from ...config.settings import Settings, get_settings
from ...core.chain import SpotPrice
from ...core.models import LeapsAnalysis, StockFundamentals
from ...core.strategies import analyze_leaps
from ..market_data import MarketDataService, universe_tickers
from ..options_data import OptionsDataService
from .filters import apply_screening_filters, strategy_candidates
from .models import (
    PROFILES,
    STRATEGY_ALL,
    ScreenedStock,
    ScreeningCriteria,
    ScreeningResult,
    ThresholdProfile,
)

logger = get_logger(__name__)


class ScreeningService:
    """Runs fundamentals screening and, optionally, LEAPS strategy analysis."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        market_data: Optional[MarketDataService] = None,
        options_data: Optional[OptionsDataService] = None,
    ):
        self.settings = settings or get_settings()
        self.market_data = market_data or MarketDataService(self.settings)
        self.options_data = options_data or OptionsDataService(self.settings)
        self.logger = logger.bind(component="screening_service")

    def resolve_profile(self, name: Optional[str] = None) -> ThresholdProfile:
        return PROFILES[(name or self.settings.screening_profile).lower()]

    async def analyze_stock(
        self, fundamentals: StockFundamentals, now: Optional[datetime] = None
    ) -> LeapsAnalysis:
        """Build chains around the fundamentals price and run every strategy."""
        chain_set = await self.options_data.get_leaps_chains(
            fundamentals.ticker, spot=SpotPrice(fundamentals.close), now=now
        )
        return analyze_leaps(fundamentals, chain_set)

    async def _analyze_many(
        self, stocks: List[ScreenedStock], now: Optional[datetime]
    ) -> Dict[str, LeapsAnalysis]:
        analyses = await asyncio.gather(
            *(self.analyze_stock(s.fundamentals, now) for s in stocks)
        )
        return {a.ticker: a for a in analyses}

    async def screen(
        self,
        criteria: Optional[ScreeningCriteria] = None,
        use_live_data: bool = False,
        include_leaps: bool = False,
        profile: Optional[str] = None,
        tickers: Optional[Sequence[str]] = None,
        universe_name: str = "default",
        now: Optional[datetime] = None,
    ) -> ScreeningResult:
        """
        Screen a ticker universe.

        Args:
            criteria: User thresholds (defaults when None)
            use_live_data: Fetch from providers when keys are configured
            include_leaps: Run chain synthesis and strategy analysis on the
                top results
            profile: Threshold profile name, settings default when None
            tickers: Explicit ticker list, overrides ``universe_name``
            universe_name: Named universe, "default" (50 names) or "sp500"
            now: Clock override for expiration selection

        Returns:
            ScreeningResult with results sorted by market cap
        """
        started = time.perf_counter()
        criteria = criteria or ScreeningCriteria()
        threshold_profile = self.resolve_profile(profile)
        universe = list(tickers) if tickers else universe_tickers(universe_name)

        fetched = await self.market_data.get_universe_data(universe, use_live_data)
        fallback_tickers = [r.ticker for r in fetched if r.error is not None]

        screened = apply_screening_filters(
            (r.fundamentals for r in fetched), criteria, threshold_profile
        )
        candidates = strategy_candidates(screened)
        if criteria.strategy == STRATEGY_ALL:
            selected = screened
        else:
            selected = candidates[criteria.strategy]

        limit = min(criteria.max_results, self.settings.max_results)
        results = selected[:limit]

        leaps_analysis: Dict[str, LeapsAnalysis] = {}
        if include_leaps and self.settings.leaps_analysis_limit:
            leaps_analysis = await self._analyze_many(
                results[: self.settings.leaps_analysis_limit], now
            )

        log_performance(
            "screen",
            (time.perf_counter() - started) * 1000,
            universe=len(universe),
            passed=len(screened),
            profile=threshold_profile.name,
            leaps=len(leaps_analysis),
        )

        return ScreeningResult(
            data_source=self.market_data.data_source(use_live_data),
            profile=threshold_profile,
            criteria=criteria,
            total_results=len(selected),
            results=results,
            strategy_results=candidates,
            leaps_analysis=leaps_analysis,
            fallback_tickers=fallback_tickers,
            screened_count=len(screened),
        )
