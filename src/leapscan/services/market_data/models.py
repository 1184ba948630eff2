"""Data models for the market data service."""

from dataclasses import dataclass
from typing import Optional

from ...core.exceptions import LeapscanError
from ...core.models import DataOrigin, StockFundamentals


class MarketDataError(LeapscanError):
    """Raised when a fundamentals provider cannot supply usable data."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


@dataclass(frozen=True)
class FundamentalsResult:
    """A fundamentals record tagged with where it came from.

    ``error`` holds the upstream failure when the record is a fallback.
    """

    fundamentals: StockFundamentals
    origin: DataOrigin
    error: Optional[str] = None

    @property
    def ticker(self) -> str:
        return self.fundamentals.ticker

    @property
    def is_live(self) -> bool:
        return self.origin is DataOrigin.LIVE
