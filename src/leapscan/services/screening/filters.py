"""Threshold and strategy-candidate filters over fundamentals."""

from typing import Callable, Dict, Iterable, List

from ...core.models import StockFundamentals
from .models import ScreenedStock, ScreeningCriteria, ThresholdProfile

StockPredicate = Callable[[ScreenedStock], bool]


def passes_thresholds(
    stock: StockFundamentals, criteria: ScreeningCriteria, profile: ThresholdProfile
) -> bool:
    """True when ``stock`` clears both the user criteria and the profile."""
    pe_ratio = stock.pe_ratio
    return (
        stock.market_cap / 1e9 >= criteria.min_market_cap
        and stock.volume / 1e6 >= criteria.min_volume
        and pe_ratio is not None
        and 0 < pe_ratio <= criteria.max_pe
        and stock.roe >= criteria.min_roe
        and stock.debt_to_equity <= profile.max_debt_to_equity
        and stock.revenue_growth >= criteria.min_rev_growth
        and stock.eps_growth >= profile.min_eps_growth
        and profile.min_rsi <= stock.rsi <= profile.max_rsi
        and profile.min_beta <= stock.beta <= profile.max_beta
        and stock.recommendation_mark <= profile.max_recommendation
        and stock.price_target_delta >= criteria.min_upside
    )


def enrich(stock: StockFundamentals) -> ScreenedStock:
    average_volume = stock.average_volume_10d
    return ScreenedStock(
        fundamentals=stock,
        market_cap_billions=stock.market_cap / 1e9,
        volume_ratio=stock.volume / average_volume if average_volume else 0.0,
        analyst_score=6 - stock.recommendation_mark,
    )


def apply_screening_filters(
    stocks: Iterable[StockFundamentals],
    criteria: ScreeningCriteria,
    profile: ThresholdProfile,
) -> List[ScreenedStock]:
    """
    Filter and enrich fundamentals records.

    Returns:
        Passing stocks, largest market cap first
    """
    passed = [enrich(s) for s in stocks if passes_thresholds(s, criteria, profile)]
    return sorted(passed, key=lambda s: s.fundamentals.market_cap, reverse=True)


def _stock_replacement(s: ScreenedStock) -> bool:
    f = s.fundamentals
    return (
        f.pe_ratio is not None
        and f.pe_ratio <= 30
        and f.beta <= 1.5
        and f.roe >= 15
        and s.market_cap_billions >= 50
    )


def _pmcc(s: ScreenedStock) -> bool:
    f = s.fundamentals
    return (
        f.close >= 100
        and 0.8 <= f.beta <= 2.0
        and f.volume >= 2_000_000
        and f.price_target_delta >= 10
    )


def _growth(s: ScreenedStock) -> bool:
    f = s.fundamentals
    return (
        f.revenue_growth >= 15
        and f.eps_growth >= 10
        and f.price_target_delta >= 20
        and f.roe >= 20
    )


def _value(s: ScreenedStock) -> bool:
    f = s.fundamentals
    return (
        f.pe_ratio is not None
        and f.pe_ratio <= 20
        and f.roe >= 12
        and f.debt_to_equity <= 1.0
        and f.price_target_delta >= 15
        and f.rsi <= 50
    )


CANDIDATE_FILTERS: Dict[str, StockPredicate] = {
    "stock_replacement": _stock_replacement,
    "pmcc": _pmcc,
    "growth": _growth,
    "value": _value,
}


def strategy_candidates(stocks: List[ScreenedStock]) -> Dict[str, List[ScreenedStock]]:
    """Screened stocks whose fundamentals suit each strategy."""
    return {
        name: [s for s in stocks if predicate(s)]
        for name, predicate in CANDIDATE_FILTERS.items()
    }
