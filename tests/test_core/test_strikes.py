"""Tests for the strike ladder."""

import sys

import pytest

sys.path.append("src")

from leapscan.core.exceptions import InvalidInputError
from leapscan.core.strikes import MAX_STRIKES, generate_strikes, strike_interval


class TestStrikeInterval:
    """Test price tiers."""

    @pytest.mark.parametrize(
        "spot, interval",
        [
            (10, 2.5),
            (24.99, 2.5),
            (25, 5.0),
            (49.99, 5.0),
            (50, 10.0),
            (199, 10.0),
            (200, 25.0),
            (499, 25.0),
            (500, 50.0),
            (3000, 50.0),
        ],
    )
    def test_tiers(self, spot, interval):
        assert strike_interval(spot) == interval


class TestGenerateStrikes:
    """Test ladder construction."""

    def test_ladder_spans_half_to_double_spot(self):
        strikes = generate_strikes(100)

        assert strikes[0] == 50
        assert strikes[-1] == 200
        assert len(strikes) == 16

    def test_ladder_is_strictly_increasing(self):
        for spot in (3.2, 22, 47, 175, 320, 780):
            strikes = generate_strikes(spot)
            assert all(a < b for a, b in zip(strikes, strikes[1:]))

    def test_ladder_is_capped(self):
        strikes = generate_strikes(499)

        assert len(strikes) == MAX_STRIKES
        assert strikes[0] == 225
        assert strikes[-1] == 950

    def test_strikes_on_interval_grid(self):
        strikes = generate_strikes(20)

        assert strikes[0] == 10
        assert strikes[-1] == 40
        assert all((s / 2.5).is_integer() for s in strikes)

    def test_non_positive_strikes_dropped(self):
        assert generate_strikes(0.3) == [2.5]

    @pytest.mark.parametrize("spot", [0, -10, float("nan"), None])
    def test_invalid_spot(self, spot):
        with pytest.raises(InvalidInputError):
            generate_strikes(spot)
