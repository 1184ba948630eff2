"""Shared test configuration and fixtures."""

import random
import sys
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Tuple

import pytest

sys.path.append("src")

from leapscan.config.settings import Settings, get_settings
from leapscan.core.models import (
    ChainProvenance,
    ChainRow,
    DataOrigin,
    LeapsChainSet,
    Moneyness,
    OptionQuote,
    OptionsChain,
    OptionType,
    StockFundamentals,
)


class ScriptedRandom:
    """
    Deterministic stand-in for ``random.Random``.

    ``uniform(a, b)`` returns the value scripted for the ``(a, b)`` range,
    or ``a`` when nothing is scripted. ``randint`` always returns its lower
    bound so volumes and open interest are predictable.
    """

    def __init__(self, uniforms: Optional[Dict[Tuple[float, float], float]] = None):
        self.uniforms = uniforms or {}
        self.calls = []

    def random(self) -> float:
        self.calls.append(("random",))
        return 0.5

    def uniform(self, a: float, b: float) -> float:
        self.calls.append(("uniform", a, b))
        return self.uniforms.get((a, b), a)

    def randint(self, a: int, b: int) -> int:
        self.calls.append(("randint", a, b))
        return a


@pytest.fixture
def scripted_rng():
    """Random source pinning IV to 0.30 and spreads to 4%."""
    return ScriptedRandom({(0.25, 0.55): 0.30, (0.02, 0.05): 0.04})


@pytest.fixture
def seeded_rng():
    return random.Random(42)


@pytest.fixture
def fixed_now():
    """Fixed clock for expiration selection."""
    return datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_fundamentals(**overrides: Any) -> StockFundamentals:
    """Large, profitable, moderately priced stock; override any field."""
    values = dict(
        ticker="AAPL",
        name="Apple Inc.",
        close=200.0,
        volume=50_000_000,
        average_volume_10d=45_000_000,
        market_cap=3.0e12,
        pe_ratio=25.0,
        roe=30.0,
        debt_to_equity=0.8,
        revenue_growth=8.0,
        eps_growth=10.0,
        beta=1.2,
        rsi=55.0,
        recommendation_mark=2.0,
        price_target=230.0,
        price_target_delta=15.0,
        sector="Technology",
        data_source=DataOrigin.MOCK,
    )
    values.update(overrides)
    return StockFundamentals(**values)


@pytest.fixture
def sample_fundamentals():
    return make_fundamentals()


def make_quote(
    option_type: OptionType = OptionType.CALL,
    strike: float = 150.0,
    mid: float = 55.0,
    delta: float = 0.75,
    theta: float = -0.02,
) -> OptionQuote:
    """Hand-built quote with only the fields strategies read set meaningfully."""
    return OptionQuote(
        option_type=option_type,
        strike=strike,
        bid=mid - 0.5,
        ask=mid + 0.5,
        mid_price=mid,
        volume=500,
        open_interest=1000,
        implied_volatility=0.3,
        delta=delta,
        gamma=0.01,
        theta=theta,
        vega=0.1,
        intrinsic_value=0.0,
        time_value=mid,
        moneyness=Moneyness.ATM,
        breakeven=strike + mid,
        max_loss=mid,
        max_gain="unlimited",
        annualized_return=0.0,
    )


def make_row(
    strike: float,
    call_mid: float = 10.0,
    call_delta: float = 0.5,
    put_mid: float = 10.0,
    put_delta: float = -0.5,
) -> ChainRow:
    return ChainRow(
        strike=strike,
        call=make_quote(OptionType.CALL, strike, call_mid, call_delta),
        put=make_quote(OptionType.PUT, strike, put_mid, put_delta),
    )


def make_chain(
    rows, expiration: date = date(2026, 1, 15), days: int = 380, spot: float = 200.0
) -> OptionsChain:
    rows = tuple(rows)
    strikes = tuple(row.strike for row in rows)
    return OptionsChain(
        ticker="AAPL",
        expiration=expiration,
        days_to_expiry=days,
        spot_price=spot,
        strikes=strikes,
        atm_strike=min(strikes, key=lambda s: abs(s - spot)),
        rows=rows,
    )


def make_chain_set(*chains: OptionsChain, spot: float = 200.0) -> LeapsChainSet:
    return LeapsChainSet(
        ticker="AAPL",
        generated_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        provenance=ChainProvenance.MOCK,
        spot_price=spot,
        spot_is_fallback=False,
        chains=tuple(chains),
    )


@pytest.fixture
def test_settings():
    """Settings with no provider keys and no batch delay."""
    return Settings(
        _env_file=None,
        environment="testing",
        alpha_vantage_api_key=None,
        twelve_data_api_key=None,
        polygon_api_key=None,
        market_data_batch_delay_seconds=0,
    )


@pytest.fixture
def live_settings():
    """Settings with provider keys so live paths are taken."""
    return Settings(
        _env_file=None,
        environment="testing",
        alpha_vantage_api_key="av-test",
        twelve_data_api_key="td-test",
        polygon_api_key="pg-test",
        market_data_batch_size=2,
        market_data_batch_delay_seconds=0.5,
    )


@pytest.fixture(autouse=True)
def clean_lru_cache():
    """Clear cached settings between tests to avoid state pollution."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fundamentals_factory():
    return make_fundamentals


@pytest.fixture
def quote_factory():
    return make_quote


@pytest.fixture
def chain_factory():
    """Builders for hand-made rows, chains and chain sets."""

    class ChainFactory:
        row = staticmethod(make_row)
        chain = staticmethod(make_chain)
        chain_set = staticmethod(make_chain_set)

    return ChainFactory
