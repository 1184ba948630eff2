"""Tests for the Alpha Vantage / Twelve Data client."""

import sys
from unittest.mock import AsyncMock

import pytest

sys.path.append("src")

from leapscan.services.market_data import MarketDataClient, MarketDataError


@pytest.fixture
def client():
    return MarketDataClient(alpha_vantage_key="av-test", twelve_data_key="td-test")


class TestMarketDataClient:
    @pytest.mark.asyncio
    async def test_overview(self, client):
        client._get_json = AsyncMock(return_value={"Symbol": "AAPL", "PERatio": "29"})

        overview = await client.get_company_overview("AAPL")

        assert overview["PERatio"] == "29"
        params = client._get_json.await_args.args[1]
        assert params["function"] == "OVERVIEW"
        assert params["apikey"] == "av-test"

    @pytest.mark.asyncio
    async def test_overview_rate_limit_note(self, client):
        client._get_json = AsyncMock(return_value={"Note": "Thank you for using Alpha Vantage"})

        with pytest.raises(MarketDataError):
            await client.get_company_overview("AAPL")

    @pytest.mark.asyncio
    async def test_missing_keys(self):
        client = MarketDataClient()

        with pytest.raises(MarketDataError):
            await client.get_company_overview("AAPL")
        with pytest.raises(MarketDataError):
            await client.get_quote("AAPL")
        assert await client.get_rsi("AAPL") is None

    @pytest.mark.asyncio
    async def test_quote_mapping(self, client):
        client._get_json = AsyncMock(
            return_value={
                "symbol": "AAPL",
                "close": "201.5",
                "volume": "1000",
                "average_volume": "900",
                "change": "1.5",
            }
        )

        quote = await client.get_quote("AAPL")

        assert quote["price"] == "201.5"
        assert quote["average_volume"] == "900"

    @pytest.mark.asyncio
    async def test_quote_error_status(self, client):
        client._get_json = AsyncMock(
            return_value={"status": "error", "message": "symbol not found"}
        )

        with pytest.raises(MarketDataError, match="symbol not found"):
            await client.get_quote("NOPE")

    @pytest.mark.asyncio
    async def test_rsi_latest_value(self, client):
        client._get_json = AsyncMock(
            return_value={
                "Technical Analysis: RSI": {
                    "2025-01-02": {"RSI": "61.2"},
                    "2025-01-03": {"RSI": "58.7"},
                }
            }
        )

        assert await client.get_rsi("AAPL") == pytest.approx(58.7)

    @pytest.mark.asyncio
    async def test_rsi_missing_series(self, client):
        client._get_json = AsyncMock(return_value={"Information": "premium endpoint"})

        assert await client.get_rsi("AAPL") is None
