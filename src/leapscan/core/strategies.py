"""
LEAPS strategy eligibility engine.

Each analyzer looks at one fundamentals record and one chain set and
returns a ``StrategyRecommendation``. A strategy that finds no suitable
contract is reported as non-viable with a reason, never raised.
"""

from typing import Callable, Dict, List, Optional

from ..config.logging import get_logger, log_error
from .models import (
    CONTRACT_MULTIPLIER,
    UNLIMITED,
    ChainRow,
    Economics,
    LeapsAnalysis,
    LeapsChainSet,
    OptionsChain,
    RiskLevel,
    SkillLevel,
    StockFundamentals,
    StrategyRecommendation,
    TradeLeg,
)
from .risk import assess_options_liquidity, assess_risk_profile, calculate_probability

logger = get_logger(__name__)

STOCK_REPLACEMENT = "stock_replacement"
PMCC = "pmcc"
GROWTH = "growth"
VALUE = "value"
PROTECTIVE_PUT = "protective_put"
DIAGONAL_SPREAD = "diagonal_spread"

TOP_RECOMMENDATIONS = 3
THETA_WINDOW_DAYS = 30

Analyzer = Callable[[StockFundamentals, LeapsChainSet], StrategyRecommendation]


def _find_row(chain: OptionsChain, predicate: Callable[[ChainRow], bool]) -> Optional[ChainRow]:
    """First row in ascending strike order satisfying ``predicate``."""
    return next((row for row in chain.rows if predicate(row)), None)


def analyze_stock_replacement(
    fundamentals: StockFundamentals, chain_set: LeapsChainSet
) -> StrategyRecommendation:
    """Deep ITM LEAPS call held in place of 100 shares."""
    spot = fundamentals.close
    chain = chain_set.longest

    row = _find_row(
        chain, lambda r: 0.70 <= r.call.delta <= 0.80 and r.strike < spot
    )
    if row is None:
        return StrategyRecommendation.not_viable(
            STOCK_REPLACEMENT, "No suitable deep ITM calls found"
        )

    call = row.call
    mid = call.mid_price
    leverage = spot / mid
    capital_savings = spot - mid
    roi = capital_savings / mid * 100
    breakeven = row.strike + mid
    viable = leverage >= 3 and call.delta >= 0.70

    return StrategyRecommendation(
        strategy=STOCK_REPLACEMENT,
        viable=viable,
        reason=None if viable else "Leverage below 3x stock ownership",
        setup=(
            TradeLeg("BUY_TO_OPEN", "CALL", row.strike, chain.expiration, mid, call.delta),
        ),
        economics=Economics(
            capital_required=mid * CONTRACT_MULTIPLIER,
            breakeven=breakeven,
            expected_return=roi,
            max_loss=mid * CONTRACT_MULTIPLIER,
            max_gain=UNLIMITED,
        ),
        probability=calculate_probability(fundamentals, breakeven),
        description=(
            f"Replace {fundamentals.ticker} stock position with deep ITM LEAPS call"
        ),
        pros=(
            f"{leverage:.1f}x leverage vs stock ownership",
            f"Save ${capital_savings:.2f} per share in capital",
            f"{call.delta:.2f} delta provides {call.delta * 100:.0f}% stock exposure",
        ),
        cons=(
            f"Time decay of ${abs(call.theta):.2f} per day",
            "No dividends received",
            f"Risk of total loss if stock falls below {row.strike:.2f}",
        ),
        risk_level=RiskLevel.MEDIUM,
        skill_level=SkillLevel.INTERMEDIATE,
        details={
            "leverage": leverage,
            "capital_saved": capital_savings * CONTRACT_MULTIPLIER,
            "time_decay": abs(call.theta) * THETA_WINDOW_DAYS,
            "days_to_expiry": chain.days_to_expiry,
            "annualized_return": roi * 365 / chain.days_to_expiry,
        },
    )


def analyze_pmcc(
    fundamentals: StockFundamentals, chain_set: LeapsChainSet
) -> StrategyRecommendation:
    """Poor man's covered call: long LEAPS call financed by a short OTM call."""
    spot = fundamentals.close
    long_chain = chain_set.longest
    short_chain = chain_set.nearest

    long_row = _find_row(long_chain, lambda r: r.call.delta >= 0.70 and r.strike < spot)
    short_row = _find_row(
        short_chain, lambda r: 0.25 <= r.call.delta <= 0.35 and r.strike > spot
    )
    if long_row is None or short_row is None:
        return StrategyRecommendation.not_viable(PMCC, "Unable to find suitable call spread")

    long_mid = long_row.call.mid_price
    short_mid = short_row.call.mid_price
    net_debit = long_mid - short_mid
    if net_debit <= 0:
        return StrategyRecommendation.not_viable(
            PMCC, "Short call premium covers the long call"
        )

    max_profit = (short_row.strike - long_row.strike) - net_debit
    roi = max_profit / net_debit * 100
    viable = max_profit > 0 and roi > 15

    return StrategyRecommendation(
        strategy=PMCC,
        viable=viable,
        reason=None if viable else "Spread return below 15%",
        setup=(
            TradeLeg(
                "BUY_TO_OPEN",
                "CALL",
                long_row.strike,
                long_chain.expiration,
                long_mid,
                long_row.call.delta,
            ),
            TradeLeg(
                "SELL_TO_OPEN",
                "CALL",
                short_row.strike,
                short_chain.expiration,
                short_mid,
                short_row.call.delta,
            ),
        ),
        economics=Economics(
            capital_required=net_debit * CONTRACT_MULTIPLIER,
            breakeven=long_row.strike + net_debit,
            expected_return=roi,
            max_loss=net_debit * CONTRACT_MULTIPLIER,
            max_gain=max_profit * CONTRACT_MULTIPLIER,
        ),
        probability=calculate_probability(fundamentals, short_row.strike),
        description=(
            f"PMCC using {long_chain.expiration.isoformat()} long call and "
            f"{short_chain.expiration.isoformat()} short call"
        ),
        pros=(
            "Lower capital requirement than covered calls",
            "Generate income from short call premium",
            "Profit from moderate upward moves",
        ),
        cons=(
            "Limited upside above short strike",
            "Time decay on long option",
            "Early assignment risk on short call",
        ),
        risk_level=RiskLevel.MEDIUM_HIGH,
        skill_level=SkillLevel.ADVANCED,
        details={
            "net_debit": net_debit,
            "max_profit": max_profit,
            # take profits at 25% of max; roll the short call at $0.05,
            # manage the long call when down 50%
            "profit_target": 25,
            "roll_points": {"short_call": 0.05, "long_call": -50},
        },
    )


def analyze_growth(
    fundamentals: StockFundamentals, chain_set: LeapsChainSet
) -> StrategyRecommendation:
    """ATM/OTM LEAPS call on a fast grower with analyst upside."""
    if fundamentals.revenue_growth < 15 or fundamentals.price_target_delta < 20:
        return StrategyRecommendation.not_viable(GROWTH, "Insufficient growth metrics")

    spot = fundamentals.close
    chain = chain_set.chains[1] if len(chain_set.chains) > 1 else chain_set.chains[0]

    row = _find_row(
        chain, lambda r: 0.40 <= r.call.delta <= 0.60 and r.strike >= spot
    )
    if row is None:
        return StrategyRecommendation.not_viable(GROWTH, "No suitable OTM calls found")

    call = row.call
    mid = call.mid_price
    target_price = spot * (1 + fundamentals.price_target_delta / 100)
    profit_at_target = max(target_price - row.strike - mid, 0.0)
    roi = profit_at_target / mid * 100
    viable = roi > 50 and mid > 2

    return StrategyRecommendation(
        strategy=GROWTH,
        viable=viable,
        reason=None if viable else "Return at target below 50% or premium under $2",
        setup=(TradeLeg("BUY_TO_OPEN", "CALL", row.strike, chain.expiration, mid, call.delta),),
        economics=Economics(
            capital_required=mid * CONTRACT_MULTIPLIER,
            breakeven=row.strike + mid,
            expected_return=roi,
            max_loss=mid * CONTRACT_MULTIPLIER,
            max_gain=UNLIMITED,
        ),
        probability=calculate_probability(fundamentals, row.strike),
        description=(
            f"Growth LEAPS play targeting {fundamentals.price_target_delta:.1f}% upside"
        ),
        pros=(
            f"High growth potential with {fundamentals.revenue_growth:.1f}% revenue growth",
            "Limited downside to option premium",
            "Leverage to growth story execution",
        ),
        cons=(
            "High time decay risk",
            "Requires significant stock appreciation",
            "Volatile growth stocks can decline rapidly",
        ),
        risk_level=RiskLevel.HIGH,
        skill_level=SkillLevel.INTERMEDIATE,
        details={
            "target_price": target_price,
            "profit_at_target": profit_at_target * CONTRACT_MULTIPLIER,
            "time_decay": abs(call.theta) * THETA_WINDOW_DAYS,
            "growth_drivers": [
                f"{fundamentals.revenue_growth:.1f}% revenue growth",
                f"{fundamentals.price_target_delta:.1f}% analyst price target upside",
                f"High beta ({fundamentals.beta:.2f}) for momentum plays",
            ],
        },
    )


def analyze_value(
    fundamentals: StockFundamentals, chain_set: LeapsChainSet
) -> StrategyRecommendation:
    """ITM LEAPS call on a cheap, profitable company."""
    pe_ratio = fundamentals.pe_ratio
    if pe_ratio is None or pe_ratio > 20 or fundamentals.roe < 12:
        return StrategyRecommendation.not_viable(VALUE, "Does not meet value criteria")

    spot = fundamentals.close
    chain = chain_set.longest

    row = _find_row(
        chain, lambda r: 0.60 <= r.call.delta <= 0.70 and r.strike < spot
    )
    if row is None:
        return StrategyRecommendation.not_viable(VALUE, "No suitable ITM value calls found")

    call = row.call
    mid = call.mid_price
    intrinsic = max(spot - row.strike, 0.0)
    time_value = mid - intrinsic
    time_premium = time_value / mid * 100
    viable = time_value < intrinsic and fundamentals.price_target_delta > 10

    return StrategyRecommendation(
        strategy=VALUE,
        viable=viable,
        reason=None if viable else "Time premium too high or upside under 10%",
        setup=(TradeLeg("BUY_TO_OPEN", "CALL", row.strike, chain.expiration, mid, call.delta),),
        economics=Economics(
            capital_required=mid * CONTRACT_MULTIPLIER,
            breakeven=row.strike + mid,
            expected_return=fundamentals.price_target_delta,
            max_loss=mid * CONTRACT_MULTIPLIER,
            max_gain=UNLIMITED,
        ),
        description=(
            f"Value LEAPS on undervalued {fundamentals.ticker} with strong fundamentals"
        ),
        pros=(
            f"Low time premium ({time_premium:.1f}%)",
            "High intrinsic value provides downside protection",
            "Value catalyst potential for re-rating",
        ),
        cons=(
            "Value traps can persist longer than expected",
            "Lower volatility may limit premium expansion",
            "Requires patience for value realization",
        ),
        risk_level=RiskLevel.MEDIUM,
        skill_level=SkillLevel.INTERMEDIATE,
        details={
            "intrinsic_value": intrinsic,
            "time_value": time_value,
            "time_premium": time_premium,
            "annual_time_decay": time_value / chain.days_to_expiry * 365,
            "value_catalysts": [
                f"P/E of {pe_ratio:.1f} below market average",
                f"Strong ROE of {fundamentals.roe:.1f}%",
                f"{fundamentals.price_target_delta:.1f}% upside to analyst targets",
            ],
        },
    )


def analyze_protective_put(
    fundamentals: StockFundamentals, chain_set: LeapsChainSet
) -> StrategyRecommendation:
    """OTM LEAPS put bought against 100 shares."""
    spot = fundamentals.close
    chain = chain_set.nearest

    row = _find_row(
        chain, lambda r: -0.20 <= r.put.delta <= -0.10 and r.strike < spot * 0.9
    )
    if row is None:
        return StrategyRecommendation.not_viable(
            PROTECTIVE_PUT, "No suitable protective puts available"
        )

    put = row.put
    mid = put.mid_price
    insurance_cost = mid / spot * 100
    protection = (spot - row.strike) / spot * 100
    viable = insurance_cost < 8 and protection > 10

    return StrategyRecommendation(
        strategy=PROTECTIVE_PUT,
        viable=viable,
        reason=None if viable else "Protection costs 8% of spot or more",
        setup=(TradeLeg("BUY_TO_OPEN", "PUT", row.strike, chain.expiration, mid, put.delta),),
        # the cost of insurance is the return drag
        economics=Economics(
            capital_required=mid * CONTRACT_MULTIPLIER,
            breakeven=spot + mid,
            expected_return=-insurance_cost,
            max_loss=(spot - row.strike + mid) * CONTRACT_MULTIPLIER,
            max_gain=UNLIMITED,
        ),
        description=f"Protect stock position with {protection:.1f}% downside coverage",
        risk_level=RiskLevel.LOW,
        skill_level=SkillLevel.BEGINNER,
        details={
            "stock_position": CONTRACT_MULTIPLIER,
            "insurance_cost": insurance_cost,
            "protection_level": protection,
        },
    )


def analyze_diagonal_spread(
    fundamentals: StockFundamentals, chain_set: LeapsChainSet
) -> StrategyRecommendation:
    return StrategyRecommendation.not_viable(DIAGONAL_SPREAD, "Strategy under development")


STRATEGIES: Dict[str, Analyzer] = {
    STOCK_REPLACEMENT: analyze_stock_replacement,
    PMCC: analyze_pmcc,
    GROWTH: analyze_growth,
    VALUE: analyze_value,
    PROTECTIVE_PUT: analyze_protective_put,
    DIAGONAL_SPREAD: analyze_diagonal_spread,
}


def run_strategies(
    fundamentals: StockFundamentals,
    chain_set: LeapsChainSet,
    strategies: Optional[Dict[str, Analyzer]] = None,
) -> List[StrategyRecommendation]:
    """
    Evaluate every strategy, isolating failures.

    A strategy that raises is logged and reported as non-viable so the
    remaining strategies still run.
    """
    outcomes = []
    for name, analyzer in (strategies or STRATEGIES).items():
        try:
            outcome = analyzer(fundamentals, chain_set)
        except Exception as e:
            log_error(e, strategy=name, ticker=fundamentals.ticker)
            outcome = StrategyRecommendation.not_viable(name, f"Evaluation failed: {e}")
        outcomes.append(outcome)
    return outcomes


def rank_recommendations(
    outcomes: List[StrategyRecommendation], limit: int = TOP_RECOMMENDATIONS
) -> List[StrategyRecommendation]:
    """Viable outcomes by expected return, best first."""
    viable = [outcome for outcome in outcomes if outcome.viable]
    return sorted(viable, key=lambda r: r.expected_return, reverse=True)[:limit]


def evaluate_strategies(
    fundamentals: StockFundamentals,
    chain_set: LeapsChainSet,
    limit: int = TOP_RECOMMENDATIONS,
) -> List[StrategyRecommendation]:
    """
    Rank the viable strategies for one ticker.

    Args:
        fundamentals: Fundamentals record of the underlying
        chain_set: LEAPS chains, nearest expiration first
        limit: Number of recommendations to keep

    Returns:
        Up to ``limit`` viable recommendations sorted by expected return
    """
    if not chain_set.leaps_available:
        return []
    return rank_recommendations(run_strategies(fundamentals, chain_set), limit)


def analyze_leaps(
    fundamentals: StockFundamentals, chain_set: LeapsChainSet
) -> LeapsAnalysis:
    """Full per-ticker analysis: ranked picks, every outcome and risk labels."""
    if not chain_set.leaps_available:
        return LeapsAnalysis(
            ticker=fundamentals.ticker,
            current_price=fundamentals.close,
            leaps_available=False,
        )

    outcomes = run_strategies(fundamentals, chain_set)
    recommendations = rank_recommendations(outcomes)

    logger.debug(
        "Analyzed LEAPS strategies",
        ticker=fundamentals.ticker,
        viable=sum(1 for o in outcomes if o.viable),
        top=[r.strategy for r in recommendations],
    )

    return LeapsAnalysis(
        ticker=fundamentals.ticker,
        current_price=fundamentals.close,
        leaps_available=True,
        recommendations=tuple(recommendations),
        outcomes=tuple(outcomes),
        risk_profile=assess_risk_profile(fundamentals),
        options_liquidity=assess_options_liquidity(chain_set),
    )
