"""Request models for the leapscan API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ...core.models import OptionType
from ...services.market_data import UNIVERSES
from ...services.screening.models import (
    CANDIDATE_STRATEGIES,
    STRATEGY_ALL,
    ScreeningCriteria,
)


class CamelModel(BaseModel):
    """Accepts camelCase from clients and snake_case from Python callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Existing clients send these two with all-caps acronyms
_ACRONYM_ALIASES = {"max_pe": "maxPE", "min_roe": "minROE"}


def _criteria_alias(name: str) -> str:
    return _ACRONYM_ALIASES.get(name, to_camel(name))


class CriteriaRequest(CamelModel):
    """Screening thresholds. Market cap in billions, volume in millions."""

    min_market_cap: float = Field(5.0, ge=0, description="Minimum market cap ($B)")
    min_volume: float = Field(1.0, ge=0, description="Minimum daily volume (M shares)")
    max_pe: float = Field(50.0, gt=0, description="Maximum trailing P/E")
    min_roe: float = Field(10.0, description="Minimum return on equity (%)")
    min_rev_growth: float = Field(5.0, description="Minimum revenue growth (%)")
    min_upside: float = Field(5.0, description="Minimum analyst upside (%)")
    strategy: str = Field(STRATEGY_ALL, description="'all' or a strategy name")
    max_results: int = Field(50, ge=1, le=500, description="Maximum results returned")

    model_config = ConfigDict(alias_generator=_criteria_alias, populate_by_name=True)

    @field_validator("strategy")
    @classmethod
    def validate_strategy(cls, v):
        """Validate strategy name."""
        valid = (STRATEGY_ALL,) + CANDIDATE_STRATEGIES
        if v.lower() not in valid:
            raise ValueError(f"Strategy must be one of: {', '.join(valid)}")
        return v.lower()

    def to_criteria(self) -> ScreeningCriteria:
        return ScreeningCriteria(**self.model_dump())


class ScreenerRequest(CamelModel):
    """Body of POST /api/screener."""

    criteria: CriteriaRequest = Field(default_factory=CriteriaRequest)
    use_live_data: bool = Field(False, description="Use live providers when configured")
    include_leaps: bool = Field(False, description="Run LEAPS strategy analysis")
    profile: Optional[str] = Field(
        None, description="Threshold profile: strict, moderate or lenient"
    )
    universe: str = Field("default", description="Ticker universe: default or sp500")

    @field_validator("profile")
    @classmethod
    def validate_profile(cls, v):
        if v is None:
            return v
        valid_profiles = ["strict", "moderate", "lenient"]
        if v.lower() not in valid_profiles:
            raise ValueError(f"Profile must be one of: {', '.join(valid_profiles)}")
        return v.lower()

    @field_validator("universe")
    @classmethod
    def validate_universe(cls, v):
        if v.lower() not in UNIVERSES:
            raise ValueError(f"Universe must be one of: {', '.join(UNIVERSES)}")
        return v.lower()


class OptionQuoteRequest(CamelModel):
    """Body of POST /api/options/quote."""

    option_type: OptionType = Field(..., description="call or put")
    strike: float = Field(..., description="Strike price")
    spot: float = Field(..., description="Underlying price")
    days_to_expiry: int = Field(..., description="Whole days to expiration")
    seed: Optional[int] = Field(
        None, description="Seed for reproducible volatility, spread and liquidity"
    )

    @field_validator("option_type", mode="before")
    @classmethod
    def normalize_option_type(cls, v):
        return v.lower() if isinstance(v, str) else v
