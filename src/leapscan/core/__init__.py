"""Pure pricing and strategy core: synthetic quotes, chains and LEAPS ideas."""

from .cache_keys import cache_key
from .chain import (
    SpotPrice,
    build_chain,
    build_leaps_chain_set,
    days_to_expiry,
    find_atm_strike,
    resolve_spot_price,
)
from .exceptions import InvalidInputError, LeapscanError, UpstreamShapeUnrecognizedError
from .expirations import select_expirations, select_or_default, synthetic_schedule
from .models import (
    ChainProvenance,
    DataOrigin,
    LeapsAnalysis,
    LeapsChainSet,
    OptionQuote,
    OptionsChain,
    OptionType,
    StockFundamentals,
    StrategyRecommendation,
)
from .normal import normal_cdf
from .pricer import OptionPricer, price_option
from .random_source import RandomSource, default_random_source
from .strategies import STRATEGIES, analyze_leaps, evaluate_strategies
from .strikes import generate_strikes

__all__ = [
    "ChainProvenance",
    "DataOrigin",
    "InvalidInputError",
    "LeapsAnalysis",
    "LeapsChainSet",
    "LeapscanError",
    "OptionPricer",
    "OptionQuote",
    "OptionType",
    "OptionsChain",
    "RandomSource",
    "STRATEGIES",
    "SpotPrice",
    "StockFundamentals",
    "StrategyRecommendation",
    "UpstreamShapeUnrecognizedError",
    "analyze_leaps",
    "build_chain",
    "build_leaps_chain_set",
    "cache_key",
    "days_to_expiry",
    "default_random_source",
    "evaluate_strategies",
    "find_atm_strike",
    "generate_strikes",
    "normal_cdf",
    "price_option",
    "resolve_spot_price",
    "select_expirations",
    "select_or_default",
    "synthetic_schedule",
]
