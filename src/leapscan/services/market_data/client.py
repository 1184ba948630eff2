"""HTTP client for the Alpha Vantage and Twelve Data APIs."""

from typing import Any, Dict, Optional

import aiohttp

from ...config.logging import get_logger
from .models import MarketDataError

logger = get_logger(__name__)

ALPHA_VANTAGE_BASE = "https://www.alphavantage.co/query"
TWELVE_DATA_BASE = "https://api.twelvedata.com"


class MarketDataClient:
    """Client for company overviews, quotes and RSI."""

    def __init__(
        self,
        alpha_vantage_key: Optional[str] = None,
        twelve_data_key: Optional[str] = None,
        timeout_seconds: float = 10.0,
    ):
        """
        Initialize the market data client.

        Args:
            alpha_vantage_key: Alpha Vantage API key (overview and RSI)
            twelve_data_key: Twelve Data API key (quotes)
            timeout_seconds: Total timeout per HTTP request
        """
        self.alpha_vantage_key = alpha_vantage_key
        self.twelve_data_key = twelve_data_key
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.logger = logger.bind(component="market_data_client")

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise MarketDataError(url, f"HTTP {response.status}: {error_text[:200]}")
                return await response.json(content_type=None)

    async def get_company_overview(self, ticker: str) -> Dict[str, Any]:
        """
        Fetch the Alpha Vantage OVERVIEW document for ``ticker``.

        Raises:
            MarketDataError: If no key is configured or the API reports an error
        """
        if not self.alpha_vantage_key:
            raise MarketDataError("alpha_vantage", "API key not configured")

        data = await self._get_json(
            ALPHA_VANTAGE_BASE,
            {"function": "OVERVIEW", "symbol": ticker, "apikey": self.alpha_vantage_key},
        )
        if not isinstance(data, dict):
            raise MarketDataError("alpha_vantage", "unexpected overview payload")
        # Rate limiting is reported as a 200 with a "Note"
        if data.get("Error Message") or data.get("Note"):
            raise MarketDataError("alpha_vantage", data.get("Error Message") or data["Note"])
        return data

    async def get_quote(self, ticker: str) -> Dict[str, Any]:
        """
        Fetch a Twelve Data quote for ``ticker``.

        Returns:
            Dict with price, change, percent_change, volume, average_volume
            and the OHLC fields
        """
        if not self.twelve_data_key:
            raise MarketDataError("twelve_data", "API key not configured")

        data = await self._get_json(
            f"{TWELVE_DATA_BASE}/quote",
            {"symbol": ticker, "apikey": self.twelve_data_key},
        )
        if not isinstance(data, dict) or data.get("status") == "error":
            message = data.get("message") if isinstance(data, dict) else None
            raise MarketDataError("twelve_data", message or "quote fetch failed")

        return {
            "price": data.get("close"),
            "change": data.get("change"),
            "percent_change": data.get("percent_change"),
            "volume": data.get("volume"),
            "average_volume": data.get("average_volume"),
            "close": data.get("close"),
            "high": data.get("high"),
            "low": data.get("low"),
            "open": data.get("open"),
        }

    async def get_rsi(self, ticker: str) -> Optional[float]:
        """Latest daily 14-period RSI, or None when unavailable."""
        if not self.alpha_vantage_key:
            return None

        data = await self._get_json(
            ALPHA_VANTAGE_BASE,
            {
                "function": "RSI",
                "symbol": ticker,
                "interval": "daily",
                "time_period": 14,
                "series_type": "close",
                "apikey": self.alpha_vantage_key,
            },
        )
        series = data.get("Technical Analysis: RSI") if isinstance(data, dict) else None
        if not series:
            return None

        latest = max(series)  # keys are ISO dates
        try:
            return float(series[latest]["RSI"])
        except (KeyError, TypeError, ValueError):
            self.logger.debug("Malformed RSI entry", ticker=ticker, date=latest)
            return None
