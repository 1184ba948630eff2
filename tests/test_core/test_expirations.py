"""Tests for LEAPS expiration selection."""

import sys
from datetime import datetime, timedelta, timezone

import pytest

sys.path.append("src")

from leapscan.core.exceptions import UpstreamShapeUnrecognizedError
from leapscan.core.expirations import (
    FALLBACK_EMPTY,
    FALLBACK_UNRECOGNIZED,
    LEAPS_THRESHOLD_DAYS,
    MAX_EXPIRATIONS,
    select_expirations,
    select_or_default,
    synthetic_schedule,
)


def ts(year, month, day):
    return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp())


def utc(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


YAHOO_DATES = [
    ts(2025, 6, 20),
    ts(2025, 12, 19),
    ts(2026, 1, 16),
    ts(2026, 6, 18),
    ts(2026, 12, 18),
    ts(2027, 1, 15),
]


class TestYahooShape:
    """Mapping keyed by unix timestamps."""

    def test_expiration_dates_list(self, fixed_now):
        result = select_expirations({"expirationDates": YAHOO_DATES}, fixed_now)

        assert result == [
            utc(2025, 12, 19),
            utc(2026, 1, 16),
            utc(2026, 6, 18),
            utc(2026, 12, 18),
        ]

    def test_all_beyond_threshold_and_ascending(self, fixed_now):
        shuffled = list(reversed(YAHOO_DATES)) + YAHOO_DATES[:2]
        result = select_expirations({"expirationDates": shuffled}, fixed_now)

        threshold = fixed_now + timedelta(days=LEAPS_THRESHOLD_DAYS)
        assert len(result) <= MAX_EXPIRATIONS
        assert all(d > threshold for d in result)
        assert result == sorted(set(result))

    def test_options_keyed_by_timestamp_strings(self, fixed_now):
        raw = {"options": {str(t): {} for t in YAHOO_DATES[:3]}}

        assert select_expirations(raw, fixed_now) == [utc(2025, 12, 19), utc(2026, 1, 16)]

    def test_options_as_list_of_blocks(self, fixed_now):
        raw = {"options": [{"expirationDate": t} for t in YAHOO_DATES]}

        assert select_expirations(raw, fixed_now)[0] == utc(2025, 12, 19)

    def test_unparseable_keys_skipped(self, fixed_now):
        raw = {"expirationDates": ["soon", ts(2026, 1, 16)]}

        assert select_expirations(raw, fixed_now) == [utc(2026, 1, 16)]


class TestPolygonShape:
    """List of contracts with ISO expiration dates."""

    def test_contract_list(self, fixed_now):
        raw = [
            {"ticker": "O:AAPL260116C00150000", "expiration_date": "2026-01-16"},
            {"ticker": "O:AAPL260116P00150000", "expiration_date": "2026-01-16"},
            {"ticker": "O:AAPL250620C00150000", "expiration_date": "2025-06-20"},
            {"ticker": "O:AAPL270115C00150000", "expiration_date": "2027-01-15"},
            {"ticker": "O:AAPL261218C00150000", "expiration_date": "2026-12-18"},
        ]

        assert select_expirations(raw, fixed_now) == [
            utc(2026, 1, 16),
            utc(2026, 12, 18),
            utc(2027, 1, 15),
        ]

    def test_bad_contracts_skipped(self, fixed_now):
        raw = [
            "not a contract",
            {"expiration_date": None},
            {"expiration_date": "01/16/2026"},
            {"expiration_date": "2026-06-18"},
        ]

        assert select_expirations(raw, fixed_now) == [utc(2026, 6, 18)]

    def test_capped_at_four(self, fixed_now):
        raw = [{"expiration_date": f"{2026 + i}-01-16"} for i in range(6)]

        assert len(select_expirations(raw, fixed_now)) == MAX_EXPIRATIONS


class TestUnknownShape:
    @pytest.mark.parametrize(
        "raw",
        [None, "garbage", 42, {"quote": {}}, {"options": 5}, {"expirationDates": 1234}],
    )
    def test_unrecognized_raises(self, raw, fixed_now):
        with pytest.raises(UpstreamShapeUnrecognizedError):
            select_expirations(raw, fixed_now)


class TestSyntheticSchedule:
    """January and June 15th schedule."""

    def test_start_of_year(self, fixed_now):
        assert synthetic_schedule(fixed_now) == [
            utc(2026, 1, 15),
            utc(2026, 6, 15),
            utc(2027, 1, 15),
            utc(2027, 6, 15),
        ]

    def test_mid_year_drops_near_candidates(self):
        assert synthetic_schedule(utc(2025, 6, 1)) == [
            utc(2026, 6, 15),
            utc(2027, 1, 15),
            utc(2027, 6, 15),
        ]

    def test_end_of_year(self):
        assert synthetic_schedule(utc(2025, 12, 31)) == [
            utc(2027, 1, 15),
            utc(2027, 6, 15),
        ]

    def test_naive_clock_treated_as_utc(self):
        assert synthetic_schedule(datetime(2025, 1, 1)) == synthetic_schedule(
            utc(2025, 1, 1)
        )


class TestSelectOrDefault:
    def test_recognized_shape(self, fixed_now):
        selection = select_or_default({"expirationDates": YAHOO_DATES}, fixed_now)

        assert not selection.is_fallback
        assert len(selection.expirations) == 4

    def test_unrecognized_falls_back(self, fixed_now):
        selection = select_or_default({}, fixed_now)

        assert selection.fallback_reason == FALLBACK_UNRECOGNIZED
        assert selection.expirations == synthetic_schedule(fixed_now)

    @pytest.mark.parametrize("raw", [{"options": 5}, {"expirationDates": 1234}])
    def test_mistyped_listing_falls_back(self, raw, fixed_now):
        selection = select_or_default(raw, fixed_now)

        assert selection.fallback_reason == FALLBACK_UNRECOGNIZED
        assert selection.expirations == synthetic_schedule(fixed_now)

    def test_no_leaps_falls_back(self, fixed_now):
        selection = select_or_default({"expirationDates": [ts(2025, 3, 21)]}, fixed_now)

        assert selection.fallback_reason == FALLBACK_EMPTY
        assert selection.expirations == synthetic_schedule(fixed_now)
