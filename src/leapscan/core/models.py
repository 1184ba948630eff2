"""Data models for the pricing and strategy core.

All entities are transient: they are created per request and never
mutated afterwards, hence the frozen dataclasses.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import InvalidInputError

UNLIMITED = "unlimited"
CONTRACT_MULTIPLIER = 100

Payoff = Union[float, str]


class OptionType(str, Enum):
    """Option right."""

    CALL = "call"
    PUT = "put"


class Moneyness(str, Enum):
    """Moneyness classification of a quote."""

    ITM = "ITM"
    ATM = "ATM"
    OTM = "OTM"


class DataOrigin(str, Enum):
    """Where a fundamentals record came from."""

    LIVE = "live"
    FALLBACK = "fallback"
    MOCK = "mock"


class ChainProvenance(str, Enum):
    """Upstream that supplied the expirations of a chain set."""

    POLYGON = "polygon"
    YAHOO = "yahoo"
    MOCK = "mock"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    MEDIUM_HIGH = "Medium-High"
    HIGH = "High"


class SkillLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


def to_plain(value: Any) -> Any:
    """Convert core models into JSON-friendly builtins."""
    if is_dataclass(value) and not isinstance(value, type):
        result = {f.name: to_plain(getattr(value, f.name)) for f in fields(value)}
        for name in getattr(value, "_derived_fields", ()):
            result[name] = to_plain(getattr(value, name))
        return result
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def price_target_delta_pct(spot: float, target: float) -> float:
    """Percentage distance from spot to the analyst target."""
    if not spot or not target:
        return 0.0
    return (target - spot) / spot * 100


@dataclass(frozen=True)
class StockFundamentals:
    """Per-ticker fundamentals record handed to the core."""

    ticker: str
    name: str
    close: float
    volume: float
    average_volume_10d: float
    market_cap: float
    pe_ratio: Optional[float]
    roe: float
    debt_to_equity: float
    revenue_growth: float
    eps_growth: float
    beta: float
    rsi: float
    recommendation_mark: float
    price_target: float
    price_target_delta: float
    sector: str = "Unknown"
    volatility_30d: Optional[float] = None
    data_source: DataOrigin = DataOrigin.MOCK
    data_quality: str = "low"

    def __post_init__(self):
        if self.close is None or self.close <= 0:
            raise InvalidInputError("close", self.close)
        if self.volume < 0:
            raise InvalidInputError("volume", self.volume)
        if self.pe_ratio is not None and self.pe_ratio <= 0:
            raise InvalidInputError(
                "pe_ratio", self.pe_ratio, "P/E must be positive when quoted"
            )

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


@dataclass(frozen=True)
class OptionQuote:
    """Synthetic option quote derived from spot, strike and time."""

    option_type: OptionType
    strike: float
    bid: float
    ask: float
    mid_price: float
    volume: int
    open_interest: int
    implied_volatility: float
    delta: float  # signed: calls in [0, 1], puts in [-1, 0]
    gamma: float
    theta: float
    vega: float
    intrinsic_value: float
    time_value: float
    moneyness: Moneyness
    breakeven: float
    max_loss: float
    max_gain: Payoff
    annualized_return: float

    _derived_fields = ("display_delta",)

    @property
    def display_delta(self) -> float:
        return abs(self.delta)


@dataclass(frozen=True)
class ChainRow:
    strike: float
    call: OptionQuote
    put: OptionQuote


@dataclass(frozen=True)
class OptionsChain:
    """All synthesized quotes for one (ticker, expiration)."""

    ticker: str
    expiration: date
    days_to_expiry: int
    spot_price: float
    strikes: Tuple[float, ...]
    atm_strike: float
    rows: Tuple[ChainRow, ...]

    _derived_fields = ("total_strikes",)

    @property
    def total_strikes(self) -> int:
        return len(self.strikes)


@dataclass(frozen=True)
class LeapsChainSet:
    """Up to four LEAPS chains for a ticker, nearest expiration first."""

    ticker: str
    generated_at: datetime
    provenance: ChainProvenance
    spot_price: float
    spot_is_fallback: bool
    chains: Tuple[OptionsChain, ...] = ()

    _derived_fields = ("leaps_available", "total_expirations")

    @property
    def leaps_available(self) -> bool:
        return len(self.chains) > 0

    @property
    def total_expirations(self) -> int:
        return len(self.chains)

    @property
    def nearest(self) -> OptionsChain:
        return self.chains[0]

    @property
    def longest(self) -> OptionsChain:
        return self.chains[-1]

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


@dataclass(frozen=True)
class TradeLeg:
    """One leg of a recommended trade."""

    action: str
    instrument: str
    strike: float
    expiration: date
    price: float
    delta: Optional[float] = None
    contracts: int = 1


@dataclass(frozen=True)
class Economics:
    """Per-contract economics of a strategy (dollars unless noted)."""

    capital_required: float
    breakeven: float  # per-share price
    expected_return: float  # percent
    max_loss: float
    max_gain: Payoff


@dataclass(frozen=True)
class StrategyRecommendation:
    """Outcome of one strategy predicate for one ticker."""

    strategy: str
    viable: bool
    reason: Optional[str] = None
    setup: Tuple[TradeLeg, ...] = ()
    economics: Optional[Economics] = None
    probability: Optional[float] = None
    description: str = ""
    pros: Tuple[str, ...] = ()
    cons: Tuple[str, ...] = ()
    risk_level: Optional[RiskLevel] = None
    skill_level: Optional[SkillLevel] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def not_viable(cls, strategy: str, reason: str) -> "StrategyRecommendation":
        return cls(strategy=strategy, viable=False, reason=reason)

    @property
    def expected_return(self) -> float:
        if self.economics is None:
            return float("-inf")
        return self.economics.expected_return

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


@dataclass(frozen=True)
class LeapsAnalysis:
    """Ranked strategy recommendations plus per-ticker risk labels."""

    ticker: str
    current_price: float
    leaps_available: bool
    recommendations: Tuple[StrategyRecommendation, ...] = ()
    outcomes: Tuple[StrategyRecommendation, ...] = ()
    risk_profile: Optional[str] = None
    options_liquidity: Optional[str] = None

    _derived_fields = ("total_recommendations",)

    @property
    def total_recommendations(self) -> int:
        """Viable strategies found, before the top-N cut."""
        return sum(1 for outcome in self.outcomes if outcome.viable)

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)
