"""
Tests for yfinance result conversion. No network calls.
"""

import asyncio
from datetime import date

import numpy as np
import pandas as pd
import pytest
from yfinance.exceptions import YFRateLimitError

from pricelens.services.base import NoDataError, RateLimitError, UpstreamUnavailableError
from pricelens.services.market_data.yahoo_adapter import (
    YahooFinanceProvider,
    get_yahoo_symbol,
    history_to_series,
    info_to_fundamentals,
)


@pytest.mark.parametrize(
    "ticker, asset_class, expected",
    [
        ("RELIANCE", "stock", "RELIANCE.NS"),
        ("NIFTY", "stock", "^NSEI"),
        ("ETH", "crypto", "ETH-USD"),
        ("GBP/JPY", "forex", "GBPJPY=X"),
    ],
)
def test_get_yahoo_symbol(normalizer, ticker, asset_class, expected):
    assert get_yahoo_symbol(normalizer.normalize(ticker, asset_class)) == expected


class TestHistoryToSeries:
    def test_dataframe_with_timestamp_index(self):
        index = pd.DatetimeIndex(
            ["2024-05-03", "2024-05-01", "2024-05-02", "2024-05-06"], tz="Asia/Kolkata"
        )
        history = pd.DataFrame(
            {"Open": [1.0, 1.0, 1.0, 1.0], "Close": [103.0, 101.0, 102.0, np.nan]},
            index=index,
        )

        series = history_to_series(history, "RELIANCE.NS")

        assert series.dates == (date(2024, 5, 1), date(2024, 5, 2), date(2024, 5, 3))
        assert list(series.oldest_first) == [101.0, 102.0, 103.0]

    def test_empty_frame_is_no_data(self):
        with pytest.raises(NoDataError):
            history_to_series(pd.DataFrame(), "NOPE.NS")


class TestInfoToFundamentals:
    def test_mapped_fields(self):
        fundamentals = info_to_fundamentals(
            {
                "marketCap": 19_000_000_000_000,
                "trailingPE": 27.3,
                "trailingEps": 96.1,
                "fiftyTwoWeekHigh": 3024.9,
                "fiftyTwoWeekLow": 2220.3,
                "longBusinessSummary": "Conglomerate",
            }
        )

        assert fundamentals.pe_ratio == 27.3
        assert fundamentals.analyst_target_price is None
        assert fundamentals.description == "Conglomerate"

    def test_empty_info(self):
        assert info_to_fundamentals({}) is None
        assert info_to_fundamentals({"quoteType": "EQUITY"}) is None


class TestRun:
    @pytest.fixture
    def provider(self):
        return YahooFinanceProvider(timeout=5.0)

    def test_returns_result_from_executor(self, provider):
        assert asyncio.run(provider._run(lambda: 42, "RELIANCE.NS")) == 42

    def test_rate_limit(self, provider):
        def throttled():
            raise YFRateLimitError()

        with pytest.raises(RateLimitError):
            asyncio.run(provider._run(throttled, "RELIANCE.NS"))

    def test_other_failures_are_upstream_unavailable(self, provider):
        def broken():
            raise KeyError("chart")

        with pytest.raises(UpstreamUnavailableError):
            asyncio.run(provider._run(broken, "RELIANCE.NS"))
