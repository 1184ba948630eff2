"""Data models for screening."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from ...core.models import LeapsAnalysis, StockFundamentals, to_plain

STRATEGY_ALL = "all"
CANDIDATE_STRATEGIES = ("stock_replacement", "pmcc", "growth", "value")


@dataclass(frozen=True)
class ScreeningCriteria:
    """User-tunable thresholds. Market cap in billions, volume in millions."""

    min_market_cap: float = 5.0
    min_volume: float = 1.0
    max_pe: float = 50.0
    min_roe: float = 10.0
    min_rev_growth: float = 5.0
    min_upside: float = 5.0
    strategy: str = STRATEGY_ALL
    max_results: int = 50

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ThresholdProfile:
    """Fixed guard rails applied on top of the user criteria."""

    name: str
    max_debt_to_equity: float
    min_eps_growth: float
    min_rsi: float
    max_rsi: float
    min_beta: float
    max_beta: float
    max_recommendation: float


STRICT = ThresholdProfile(
    name="strict",
    max_debt_to_equity=2.0,
    min_eps_growth=0.0,
    min_rsi=30.0,
    max_rsi=70.0,
    min_beta=0.5,
    max_beta=2.5,
    max_recommendation=2.5,
)

MODERATE = ThresholdProfile(
    name="moderate",
    max_debt_to_equity=3.0,
    min_eps_growth=-10.0,
    min_rsi=20.0,
    max_rsi=80.0,
    min_beta=0.3,
    max_beta=3.0,
    max_recommendation=3.5,
)

LENIENT = ThresholdProfile(
    name="lenient",
    max_debt_to_equity=5.0,
    min_eps_growth=-50.0,
    min_rsi=10.0,
    max_rsi=90.0,
    min_beta=0.1,
    max_beta=5.0,
    max_recommendation=5.0,
)

PROFILES: Dict[str, ThresholdProfile] = {p.name: p for p in (STRICT, MODERATE, LENIENT)}


@dataclass(frozen=True)
class ScreenedStock:
    """A stock that passed screening, with display ratios."""

    fundamentals: StockFundamentals
    market_cap_billions: float
    volume_ratio: float
    analyst_score: float

    @property
    def ticker(self) -> str:
        return self.fundamentals.ticker

    def to_dict(self) -> Dict[str, Any]:
        data = self.fundamentals.to_dict()
        data.update(
            market_cap_billions=self.market_cap_billions,
            volume_ratio=self.volume_ratio,
            analyst_score=self.analyst_score,
        )
        return data


@dataclass
class ScreeningResult:
    """Everything a screening request produces."""

    data_source: str
    profile: ThresholdProfile
    criteria: ScreeningCriteria
    total_results: int
    results: List[ScreenedStock]
    strategy_results: Dict[str, List[ScreenedStock]]
    leaps_analysis: Dict[str, LeapsAnalysis] = field(default_factory=dict)
    fallback_tickers: List[str] = field(default_factory=list)
    screened_count: int = 0

    @property
    def strategy_counts(self) -> Dict[str, int]:
        counts = {name: len(stocks) for name, stocks in self.strategy_results.items()}
        counts[STRATEGY_ALL] = self.screened_count
        return counts

    def leaps_to_dict(self) -> Dict[str, Any]:
        return {ticker: to_plain(a) for ticker, a in self.leaps_analysis.items()}
