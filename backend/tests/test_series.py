"""
Tests for PriceSeries construction and ordering.
"""

from datetime import date, datetime

import numpy as np
import pytest

from pricelens.services.base import InsufficientDataError
from pricelens.services.market_data.series import PriceSeries


# Alpha Vantage style: newest first, string dates and string closes
NEWEST_FIRST_PAYLOAD = {
    "2024-03-05": {"1. open": "102.0", "4. close": "103.50"},
    "2024-03-04": {"1. open": "101.0", "4. close": "102.25"},
    "2024-03-01": {"1. open": "100.0", "4. close": "101.00"},
}


class TestFromTimeSeries:
    def test_sorted_oldest_first(self):
        series = PriceSeries.from_time_series(NEWEST_FIRST_PAYLOAD, "4. close")

        assert series.dates == (date(2024, 3, 1), date(2024, 3, 4), date(2024, 3, 5))
        np.testing.assert_allclose(series.oldest_first, [101.0, 102.25, 103.5])
        np.testing.assert_allclose(series.newest_first, [103.5, 102.25, 101.0])

    def test_last_close_is_newest_sample(self):
        series = PriceSeries.from_time_series(NEWEST_FIRST_PAYLOAD, "4. close")
        assert series.last_close == 103.5
        assert series.last_date == date(2024, 3, 5)

    def test_unparseable_close_drops_only_that_date(self):
        payload = dict(NEWEST_FIRST_PAYLOAD)
        payload["2024-03-06"] = {"4. close": "n/a"}
        payload["2024-03-07"] = {"1. open": "104.0"}
        payload["2024-03-08"] = {"4. close": "NaN"}

        series = PriceSeries.from_time_series(payload, "4. close")
        assert len(series) == 3

    def test_close_field_fallbacks(self):
        payload = {
            "2024-03-01": {"4a. close (USD)": "42000.1"},
            "2024-03-02": {"4. close": "42500.2"},
        }
        series = PriceSeries.from_time_series(payload, ("4a. close (USD)", "4. close"))
        np.testing.assert_allclose(series.oldest_first, [42000.1, 42500.2])

    def test_datetime_keys(self):
        payload = {
            datetime(2024, 3, 1, 0, 0): {"Close": 10.0},
            "2024-03-02 00:00:00": {"Close": 11.0},
        }
        series = PriceSeries.from_time_series(payload, "Close")
        assert series.dates == (date(2024, 3, 1), date(2024, 3, 2))

    def test_nothing_usable_raises(self):
        with pytest.raises(InsufficientDataError):
            PriceSeries.from_time_series({"2024-03-01": {"4. close": "bad"}}, "4. close")


class TestFromSamples:
    def test_duplicate_dates_keep_first(self):
        series = PriceSeries.from_samples(
            [(date(2024, 1, 2), 5.0), (date(2024, 1, 1), 4.0), (date(2024, 1, 2), 9.0)]
        )
        np.testing.assert_allclose(series.oldest_first, [4.0, 5.0])

    def test_negative_close_dropped(self):
        series = PriceSeries.from_samples([(date(2024, 1, 1), -1.0), (date(2024, 1, 2), 1.0)])
        assert len(series) == 1

    def test_empty_raises(self):
        with pytest.raises(InsufficientDataError):
            PriceSeries.from_samples([])


class TestImmutability:
    def test_closes_read_only(self):
        series = PriceSeries.from_samples([(date(2024, 1, 1), 1.0)])
        with pytest.raises(ValueError):
            series.closes[0] = 2.0
        with pytest.raises(ValueError):
            series.newest_first[0] = 2.0

    def test_direct_construction_enforces_order(self):
        with pytest.raises(ValueError):
            PriceSeries(dates=(date(2024, 1, 2), date(2024, 1, 1)), closes=np.array([1.0, 2.0]))

    @pytest.mark.parametrize("closes", [[1.0, float("nan")], [1.0, float("inf")], [1.0, -5.0]])
    def test_direct_construction_enforces_valid_closes(self, closes):
        with pytest.raises(ValueError):
            PriceSeries(dates=(date(2024, 1, 1), date(2024, 1, 2)), closes=closes)

    def test_tail(self):
        series = PriceSeries.from_samples(
            [(date(2024, 1, d), float(d)) for d in range(1, 6)]
        )
        assert series.tail(2) == [(date(2024, 1, 4), 4.0), (date(2024, 1, 5), 5.0)]
        assert series.tail(0) == []
