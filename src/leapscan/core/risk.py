"""Heuristic probability, risk and liquidity labels."""

from .models import LeapsChainSet, StockFundamentals

DEFAULT_VOLATILITY = 0.3

PROBABILITY_FLOOR = 0.1
PROBABILITY_CAP = 0.9

HIGH_RISK = "High Risk"
MEDIUM_RISK = "Medium Risk"
LOW_RISK = "Low Risk"


def calculate_probability(fundamentals: StockFundamentals, target_price: float) -> float:
    """
    Linear stand-in for the chance of reaching ``target_price``.

    ``0.5 - 0.2 * z`` where z is the relative move divided by 30-day
    volatility (0.3 when unknown), clamped to [0.1, 0.9].
    """
    spot = fundamentals.close
    move = abs(target_price - spot) / spot
    volatility = fundamentals.volatility_30d or DEFAULT_VOLATILITY
    z_score = move / volatility
    return max(PROBABILITY_FLOOR, min(PROBABILITY_CAP, 0.5 - z_score * 0.2))


def assess_risk_profile(fundamentals: StockFundamentals) -> str:
    score = 0

    beta = fundamentals.beta
    if beta > 2:
        score += 3
    elif beta > 1.5:
        score += 2
    elif beta > 1:
        score += 1

    if fundamentals.debt_to_equity > 2:
        score += 2
    elif fundamentals.debt_to_equity > 1:
        score += 1

    if fundamentals.roe < 5:
        score += 2

    if fundamentals.market_cap < 2e9:
        score += 2
    elif fundamentals.market_cap < 10e9:
        score += 1

    if score >= 6:
        return HIGH_RISK
    if score >= 3:
        return MEDIUM_RISK
    return LOW_RISK


def average_option_volume(chain_set: LeapsChainSet) -> float:
    """Mean over chains of the per-chain average contract volume."""
    chain_averages = []
    for chain in chain_set.chains:
        if not chain.rows:
            continue
        total = sum(row.call.volume + row.put.volume for row in chain.rows)
        chain_averages.append(total / (len(chain.rows) * 2))

    if not chain_averages:
        return 0.0
    return sum(chain_averages) / len(chain_averages)


def assess_options_liquidity(chain_set: LeapsChainSet) -> str:
    average = average_option_volume(chain_set)
    if average > 100:
        return "Excellent"
    if average > 50:
        return "Good"
    if average > 20:
        return "Fair"
    return "Poor"
