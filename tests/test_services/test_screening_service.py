"""Tests for screening filters, profiles and the screening service."""

import random
import sys
from unittest.mock import AsyncMock, Mock

import pytest

sys.path.append("src")

from leapscan.core.chain import SpotPrice, build_leaps_chain_set
from leapscan.core.models import DataOrigin
from leapscan.services.market_data import SP500_TICKERS, FundamentalsResult
from leapscan.services.screening import (
    PROFILES,
    ScreeningCriteria,
    ScreeningService,
    apply_screening_filters,
    passes_thresholds,
    strategy_candidates,
)
from leapscan.services.screening.models import LENIENT, MODERATE, STRICT


@pytest.fixture
def universe(fundamentals_factory):
    """AAPL and MSFT pass moderate, XYZ has no P/E, HOT is overbought."""
    return [
        fundamentals_factory(),
        fundamentals_factory(
            ticker="MSFT",
            name="Microsoft Corporation",
            market_cap=3.2e12,
            revenue_growth=20.0,
            eps_growth=15.0,
            price_target_delta=25.0,
            roe=25.0,
        ),
        fundamentals_factory(ticker="XYZ", pe_ratio=None),
        fundamentals_factory(ticker="HOT", rsi=85.0, market_cap=1.0e11),
    ]


def make_market_data(stocks, fallback=()):
    results = [
        FundamentalsResult(
            s,
            DataOrigin.FALLBACK if s.ticker in fallback else DataOrigin.MOCK,
            error="timeout" if s.ticker in fallback else None,
        )
        for s in stocks
    ]
    market_data = Mock()
    market_data.get_universe_data = AsyncMock(return_value=results)
    market_data.data_source = Mock(return_value="mock")
    return market_data


def make_options_data():
    async def get_leaps_chains(ticker, spot=None, now=None):
        return build_leaps_chain_set(ticker, None, spot=spot, rng=random.Random(0), now=now)

    options_data = Mock()
    options_data.get_leaps_chains = AsyncMock(side_effect=get_leaps_chains)
    return options_data


class TestProfiles:
    def test_profiles_registered(self):
        assert set(PROFILES) == {"strict", "moderate", "lenient"}

    def test_profiles_widen(self):
        assert STRICT.max_debt_to_equity < MODERATE.max_debt_to_equity < LENIENT.max_debt_to_equity
        assert STRICT.min_rsi > MODERATE.min_rsi > LENIENT.min_rsi
        assert STRICT.max_recommendation < MODERATE.max_recommendation < LENIENT.max_recommendation


class TestFilters:
    """Test threshold and candidate filters."""

    def test_default_stock_passes_every_profile(self, sample_fundamentals):
        for profile in PROFILES.values():
            assert passes_thresholds(sample_fundamentals, ScreeningCriteria(), profile)

    def test_requires_positive_pe(self, fundamentals_factory):
        stock = fundamentals_factory(pe_ratio=None)
        assert not passes_thresholds(stock, ScreeningCriteria(), LENIENT)

    def test_user_criteria(self, sample_fundamentals):
        assert not passes_thresholds(sample_fundamentals, ScreeningCriteria(max_pe=20), MODERATE)
        assert not passes_thresholds(sample_fundamentals, ScreeningCriteria(min_roe=40), MODERATE)
        assert not passes_thresholds(
            sample_fundamentals, ScreeningCriteria(min_market_cap=5000), MODERATE
        )

    def test_profile_rsi_band(self, fundamentals_factory):
        stock = fundamentals_factory(rsi=75.0)

        assert not passes_thresholds(stock, ScreeningCriteria(), STRICT)
        assert passes_thresholds(stock, ScreeningCriteria(), MODERATE)

    def test_enriched_and_sorted_by_market_cap(self, universe):
        screened = apply_screening_filters(universe, ScreeningCriteria(), MODERATE)

        assert [s.ticker for s in screened] == ["MSFT", "AAPL"]
        aapl = screened[1]
        assert aapl.market_cap_billions == pytest.approx(3000)
        assert aapl.volume_ratio == pytest.approx(50 / 45)
        assert aapl.analyst_score == pytest.approx(4.0)

    def test_strategy_candidates(self, universe):
        screened = apply_screening_filters(universe, ScreeningCriteria(), MODERATE)
        candidates = strategy_candidates(screened)

        assert [s.ticker for s in candidates["growth"]] == ["MSFT"]
        assert {s.ticker for s in candidates["stock_replacement"]} == {"AAPL", "MSFT"}
        assert {s.ticker for s in candidates["pmcc"]} == {"AAPL", "MSFT"}
        assert candidates["value"] == []

    def test_screened_stock_to_dict(self, universe):
        (top, _) = apply_screening_filters(universe, ScreeningCriteria(), MODERATE)
        data = top.to_dict()

        assert data["ticker"] == "MSFT"
        assert data["market_cap_billions"] == pytest.approx(3200)
        assert data["data_source"] == "mock"


class TestScreeningService:
    """Test the orchestration service."""

    @pytest.mark.asyncio
    async def test_default_screen(self, test_settings, universe):
        service = ScreeningService(
            test_settings, make_market_data(universe), make_options_data()
        )

        result = await service.screen()

        assert result.profile.name == "moderate"
        assert result.data_source == "mock"
        assert [s.ticker for s in result.results] == ["MSFT", "AAPL"]
        assert result.total_results == 2
        assert result.strategy_counts == {
            "stock_replacement": 2,
            "pmcc": 2,
            "growth": 1,
            "value": 0,
            "all": 2,
        }
        assert result.leaps_analysis == {}

    @pytest.mark.asyncio
    async def test_named_universe(self, test_settings, universe):
        market_data = make_market_data(universe)
        service = ScreeningService(test_settings, market_data, make_options_data())

        await service.screen(universe_name="sp500")

        assert market_data.get_universe_data.await_args.args[0] == list(SP500_TICKERS)

    @pytest.mark.asyncio
    async def test_explicit_tickers_win_over_universe(self, test_settings, universe):
        market_data = make_market_data(universe)
        service = ScreeningService(test_settings, market_data, make_options_data())

        await service.screen(tickers=["AAPL"], universe_name="sp500")

        assert market_data.get_universe_data.await_args.args[0] == ["AAPL"]

    @pytest.mark.asyncio
    async def test_lenient_profile(self, test_settings, universe):
        service = ScreeningService(
            test_settings, make_market_data(universe), make_options_data()
        )

        result = await service.screen(profile="LENIENT")

        assert result.profile is LENIENT
        assert "HOT" in [s.ticker for s in result.results]

    @pytest.mark.asyncio
    async def test_strategy_filter(self, test_settings, universe):
        service = ScreeningService(
            test_settings, make_market_data(universe), make_options_data()
        )

        result = await service.screen(ScreeningCriteria(strategy="growth"))

        assert [s.ticker for s in result.results] == ["MSFT"]
        assert result.total_results == 1

    @pytest.mark.asyncio
    async def test_max_results(self, test_settings, universe):
        service = ScreeningService(
            test_settings, make_market_data(universe), make_options_data()
        )

        result = await service.screen(ScreeningCriteria(max_results=1))

        assert len(result.results) == 1
        assert result.total_results == 2

    @pytest.mark.asyncio
    async def test_leaps_analysis_uses_fundamentals_close(
        self, test_settings, universe, fixed_now
    ):
        options_data = make_options_data()
        service = ScreeningService(test_settings, make_market_data(universe), options_data)

        result = await service.screen(include_leaps=True, now=fixed_now)

        assert set(result.leaps_analysis) == {"MSFT", "AAPL"}
        analysis = result.leaps_analysis["AAPL"]
        assert analysis.leaps_available
        assert len(analysis.outcomes) == 6
        options_data.get_leaps_chains.assert_any_await(
            "AAPL", spot=SpotPrice(200.0), now=fixed_now
        )
        assert result.leaps_to_dict()["AAPL"]["ticker"] == "AAPL"

    @pytest.mark.asyncio
    async def test_leaps_analysis_limit(self, universe):
        from leapscan.config.settings import Settings

        settings = Settings(_env_file=None, leaps_analysis_limit=1)
        service = ScreeningService(settings, make_market_data(universe), make_options_data())

        result = await service.screen(include_leaps=True)

        assert list(result.leaps_analysis) == ["MSFT"]

    @pytest.mark.asyncio
    async def test_fallback_tickers_reported(self, test_settings, universe):
        service = ScreeningService(
            test_settings,
            make_market_data(universe, fallback=("XYZ",)),
            make_options_data(),
        )

        result = await service.screen(use_live_data=True)

        assert result.fallback_tickers == ["XYZ"]
        service.market_data.get_universe_data.assert_awaited_once()
        assert service.market_data.get_universe_data.await_args.args[1] is True

    @pytest.mark.asyncio
    async def test_screen_with_mock_universe(self, test_settings):
        from leapscan.services.market_data import MarketDataService

        service = ScreeningService(
            test_settings,
            MarketDataService(test_settings, rng=random.Random(21)),
            make_options_data(),
        )

        result = await service.screen(profile="lenient")

        caps = [s.fundamentals.market_cap for s in result.results]
        assert caps == sorted(caps, reverse=True)
        assert len(result.results) <= 50
        assert result.strategy_counts["all"] == result.total_results
