"""LEAPS chain service: upstream listings in, synthesized chain sets out."""

import asyncio
from datetime import datetime
from typing import Optional

import aiohttp

from ...cache import TTLCache
from ...config.logging import get_logger
from ...config.settings import Settings, get_settings
from ...core.cache_keys import cache_key
from ...core.chain import SpotPrice, build_leaps_chain_set
from ...core.models import ChainProvenance, LeapsChainSet
from ...core.random_source import RandomSource, resolve_random_source
from .client import OptionsDataClient
from .models import OptionsDataError, RawOptionsData

logger = get_logger(__name__)


class OptionsDataService:
    """
    Builds LEAPS chain sets for a ticker.

    Raw listings are cached per ten-minute window. Pricing runs on every
    call because the core owns no state.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[OptionsDataClient] = None,
        cache: Optional[TTLCache] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or OptionsDataClient(
            polygon_key=self.settings.polygon_api_key,
            timeout_seconds=self.settings.request_timeout_seconds,
        )
        self.cache = cache or TTLCache(self.settings.options_cache_seconds)
        self.rng = resolve_random_source(rng)
        self.logger = logger.bind(component="options_data_service")

    async def get_raw_options(self, ticker: str) -> RawOptionsData:
        """
        Fetch the upstream listing for ``ticker``.

        Failures are not raised: they come back as a ``mock`` result with
        the error text so the caller can build synthetic expirations.
        """
        ticker = ticker.upper()
        key = cache_key("leaps", ticker, self.settings.options_cache_seconds)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            raw = await self.client.fetch(ticker)
        except (OptionsDataError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self.logger.warning("options_data_fallback", ticker=ticker, error=str(e))
            return RawOptionsData(ticker, None, ChainProvenance.MOCK, error=str(e))

        self.cache.set(key, raw)
        return raw

    async def get_leaps_chains(
        self,
        ticker: str,
        spot: Optional[SpotPrice] = None,
        now: Optional[datetime] = None,
    ) -> LeapsChainSet:
        """
        Build the LEAPS chain set for ``ticker``.

        Args:
            ticker: Underlying symbol
            spot: Known spot price; resolved from the listing when omitted
            now: Clock override
        """
        raw = await self.get_raw_options(ticker)
        provenance = None if raw.is_fallback else raw.provenance
        return build_leaps_chain_set(
            raw.ticker,
            raw.payload,
            provenance=provenance,
            spot=spot,
            rng=self.rng,
            now=now,
        )
