"""Market data service module."""

from .client import MarketDataClient
from .mock_generator import (
    generate_fallback_fundamentals,
    generate_market_data,
    generate_mock_fundamentals,
)
from .models import FundamentalsResult, MarketDataError
from .service import MarketDataService
from .universe import (
    DEFAULT_UNIVERSE,
    SP500_TICKERS,
    UNIVERSES,
    default_tickers,
    normalize_tickers,
    universe_tickers,
)

__all__ = [
    "MarketDataService",
    "MarketDataClient",
    "FundamentalsResult",
    "MarketDataError",
    "generate_market_data",
    "generate_mock_fundamentals",
    "generate_fallback_fundamentals",
    "DEFAULT_UNIVERSE",
    "SP500_TICKERS",
    "UNIVERSES",
    "default_tickers",
    "universe_tickers",
    "normalize_tickers",
]
