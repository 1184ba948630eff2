"""Tests for the market data service and provider mapping."""

import random
import sys
from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest
from structlog.testing import capture_logs

sys.path.append("src")

from leapscan.cache import TTLCache
from leapscan.core.models import DataOrigin
from leapscan.services.market_data import MarketDataError, MarketDataService
from leapscan.services.market_data.service import (
    NEUTRAL_RECOMMENDATION,
    assess_data_quality,
    build_live_fundamentals,
    recommendation_mark,
)

OVERVIEW = {
    "Symbol": "AAPL",
    "Name": "Apple Inc",
    "Sector": "TECHNOLOGY",
    "MarketCapitalization": "3000000000000",
    "PERatio": "29.5",
    "ReturnOnEquityTTM": "1.47",
    "DebtToEquityRatio": "1.8",
    "QuarterlyRevenueGrowthYOY": "0.061",
    "QuarterlyEarningsGrowthYOY": "0.11",
    "Beta": "1.24",
    "AnalystTargetPrice": "220",
    "AnalystRatingStrongBuy": "10",
    "AnalystRatingBuy": "20",
    "AnalystRatingHold": "10",
    "AnalystRatingSell": "0",
    "AnalystRatingStrongSell": "0",
}

QUOTE = {
    "price": "200.00",
    "close": "200.00",
    "volume": "52000000",
    "average_volume": "48000000",
}


def make_client(overview=OVERVIEW, quote=QUOTE, rsi=48.2):
    client = Mock()
    client.get_company_overview = AsyncMock(return_value=overview)
    client.get_quote = AsyncMock(return_value=quote)
    client.get_rsi = AsyncMock(return_value=rsi)
    return client


class TestProviderMapping:
    """Test payload-to-fundamentals mapping."""

    def test_build_live_fundamentals(self):
        stock = build_live_fundamentals("AAPL", OVERVIEW, QUOTE, 48.2)

        assert stock.close == 200.0
        assert stock.name == "Apple Inc"
        assert stock.market_cap == 3e12
        assert stock.pe_ratio == 29.5
        assert stock.roe == pytest.approx(147.0)
        assert stock.revenue_growth == pytest.approx(6.1)
        assert stock.eps_growth == pytest.approx(11.0)
        assert stock.average_volume_10d == 48_000_000
        assert stock.price_target_delta == pytest.approx(10.0)
        assert stock.rsi == 48.2
        assert stock.data_source is DataOrigin.LIVE
        assert stock.data_quality == "high"

    def test_missing_pe_and_rsi(self):
        overview = dict(OVERVIEW, PERatio="None")
        stock = build_live_fundamentals("AAPL", overview, QUOTE, None, random.Random(1))

        assert stock.pe_ratio is None
        assert 20 <= stock.rsi <= 80

    def test_average_volume_falls_back_to_volume(self):
        quote = dict(QUOTE, average_volume=None)
        stock = build_live_fundamentals("AAPL", OVERVIEW, quote, 50.0)

        assert stock.average_volume_10d == 52_000_000

    def test_no_price_raises(self):
        with pytest.raises(MarketDataError):
            build_live_fundamentals("AAPL", OVERVIEW, {"volume": "10"}, 50.0)

    def test_recommendation_mark(self):
        # (10*1 + 20*2 + 10*3) / 40
        assert recommendation_mark(OVERVIEW) == pytest.approx(2.0)
        assert recommendation_mark({}) == NEUTRAL_RECOMMENDATION

    @pytest.mark.parametrize(
        "overview, quote, grade",
        [
            (OVERVIEW, QUOTE, "high"),
            ({"Name": "X"}, {"price": "1"}, "medium"),
            ({}, {"price": "1"}, "low"),
        ],
    )
    def test_data_quality(self, overview, quote, grade):
        assert assess_data_quality(overview, quote) == grade


class TestMarketDataService:
    """Test fetching, caching and fallbacks."""

    @pytest.mark.asyncio
    async def test_live_fetch_is_cached(self, live_settings):
        client = make_client()
        service = MarketDataService(live_settings, client=client, rng=random.Random(0))

        first = await service.get_stock_data("aapl")
        second = await service.get_stock_data("AAPL")

        assert first.origin is DataOrigin.LIVE
        assert first.is_live
        assert first.error is None
        assert second is first
        client.get_quote.assert_awaited_once_with("AAPL")

    @pytest.mark.asyncio
    async def test_quote_failure_falls_back(self, live_settings):
        client = make_client()
        client.get_quote = AsyncMock(side_effect=MarketDataError("twelve_data", "rate limited"))
        service = MarketDataService(live_settings, client=client, rng=random.Random(0))

        with capture_logs() as logs:
            result = await service.get_stock_data("AAPL")

        assert result.origin is DataOrigin.FALLBACK
        assert result.fundamentals.data_source is DataOrigin.FALLBACK
        assert "rate limited" in result.error
        assert any(log["event"] == "market_data_fallback" for log in logs)

    @pytest.mark.asyncio
    async def test_fallback_not_cached(self, live_settings):
        client = make_client()
        client.get_quote = AsyncMock(side_effect=aiohttp.ClientError("down"))
        service = MarketDataService(live_settings, client=client, rng=random.Random(0))

        await service.get_stock_data("AAPL")
        await service.get_stock_data("AAPL")

        assert client.get_quote.await_count == 2

    @pytest.mark.asyncio
    async def test_overview_failure_keeps_live_quote(self, live_settings):
        client = make_client()
        client.get_company_overview = AsyncMock(side_effect=MarketDataError("alpha_vantage", "Note"))
        service = MarketDataService(live_settings, client=client, rng=random.Random(0))

        result = await service.get_stock_data("AAPL")

        assert result.origin is DataOrigin.LIVE
        assert result.fundamentals.close == 200.0
        assert result.fundamentals.name == "AAPL Corporation"
        assert result.fundamentals.recommendation_mark == NEUTRAL_RECOMMENDATION

    @pytest.mark.asyncio
    async def test_batches_with_delay(self, live_settings):
        client = make_client()
        sleep = AsyncMock()
        service = MarketDataService(
            live_settings, client=client, cache=TTLCache(300), sleep=sleep
        )

        results = await service.get_batch_stock_data(["A", "B", "C", "D", "E"])

        assert [r.ticker for r in results] == ["A", "B", "C", "D", "E"]
        # batches of two: A,B | C,D | E
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    @pytest.mark.asyncio
    async def test_mock_when_live_not_requested(self, live_settings):
        client = make_client()
        service = MarketDataService(live_settings, client=client, rng=random.Random(0))

        results = await service.get_universe_data(["AAPL", "MSFT"], use_live=False)

        assert [r.origin for r in results] == [DataOrigin.MOCK, DataOrigin.MOCK]
        client.get_quote.assert_not_awaited()
        assert service.data_source(False) == "mock"

    @pytest.mark.asyncio
    async def test_mock_when_no_keys(self, test_settings):
        client = make_client()
        service = MarketDataService(test_settings, client=client, rng=random.Random(0))

        results = await service.get_universe_data(["AAPL"], use_live=True)

        assert results[0].origin is DataOrigin.MOCK
        assert not service.live_enabled
        assert service.data_source(True) == "mock"

    @pytest.mark.asyncio
    async def test_live_when_requested_and_configured(self, live_settings):
        service = MarketDataService(
            live_settings, client=make_client(), rng=random.Random(0), sleep=AsyncMock()
        )

        results = await service.get_universe_data(["AAPL"], use_live=True)

        assert results[0].is_live
        assert service.data_source(True) == "live"
