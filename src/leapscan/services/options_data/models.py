"""Data models for the options data service."""

from dataclasses import dataclass
from typing import Any, Optional

from ...core.exceptions import LeapscanError
from ...core.models import ChainProvenance


class OptionsDataError(LeapscanError):
    """Raised when an options provider returns nothing usable."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


@dataclass(frozen=True)
class RawOptionsData:
    """Upstream option listing as received, before chain synthesis."""

    ticker: str
    payload: Any
    provenance: ChainProvenance
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.provenance is ChainProvenance.MOCK
