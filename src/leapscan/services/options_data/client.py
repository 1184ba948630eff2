"""HTTP client for Polygon.io and Yahoo Finance option listings."""

from typing import Any, Dict, List, Optional

import aiohttp

from ...config.logging import get_logger
from ...core.models import ChainProvenance
from .models import OptionsDataError, RawOptionsData

logger = get_logger(__name__)

POLYGON_CONTRACTS_URL = "https://api.polygon.io/v3/reference/options/contracts"
YAHOO_OPTIONS_URL = "https://query1.finance.yahoo.com/v7/finance/options/{ticker}"
YAHOO_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class OptionsDataClient:
    """Fetches raw option listings; Polygon when a key is set, Yahoo otherwise."""

    def __init__(self, polygon_key: Optional[str] = None, timeout_seconds: float = 10.0):
        self.polygon_key = polygon_key
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.logger = logger.bind(component="options_data_client")

    async def _get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        async with aiohttp.ClientSession(timeout=self.timeout, headers=headers) as session:
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    raise OptionsDataError(url, f"HTTP {response.status}")
                return await response.json(content_type=None)

    async def get_polygon_contracts(self, ticker: str) -> List[Dict[str, Any]]:
        """
        List option contracts for ``ticker`` from Polygon.io.

        Returns:
            Contract dicts, each carrying an ISO ``expiration_date``
        """
        data = await self._get_json(
            POLYGON_CONTRACTS_URL,
            {"underlying_ticker": ticker, "limit": 1000, "apiKey": self.polygon_key},
        )
        if not isinstance(data, dict) or data.get("status") != "OK":
            raise OptionsDataError("polygon", "API returned error")
        return data.get("results") or []

    async def get_yahoo_options(self, ticker: str) -> Dict[str, Any]:
        """Fetch the first Yahoo v7 option chain result for ``ticker``."""
        data = await self._get_json(
            YAHOO_OPTIONS_URL.format(ticker=ticker),
            headers={"User-Agent": YAHOO_USER_AGENT},
        )
        chain = data.get("optionChain") if isinstance(data, dict) else None
        result = chain.get("result") if isinstance(chain, dict) else None
        if not result:
            raise OptionsDataError("yahoo", "returned no options data")
        return result[0]

    async def fetch(self, ticker: str) -> RawOptionsData:
        if self.polygon_key:
            payload = await self.get_polygon_contracts(ticker)
            return RawOptionsData(ticker, payload, ChainProvenance.POLYGON)

        payload = await self.get_yahoo_options(ticker)
        return RawOptionsData(ticker, payload, ChainProvenance.YAHOO)
