"""
Yahoo Finance Data Adapter

Fetches REAL market data from Yahoo Finance via yfinance.
Indian stocks use .NS suffix (NSE) or .BO suffix (BSE); crypto uses
BASE-QUOTE and forex uses BASEQUOTE=X.
"""

import asyncio
import logging
from typing import Any, Optional

import yfinance as yf
from yfinance.exceptions import YFRateLimitError

from pricelens.schemas.analysis import FundamentalAnalysis
from pricelens.schemas.market import AssetClass, ProviderName, SymbolRequest
from pricelens.services.base import (
    NoDataError,
    RateLimitError,
    UpstreamUnavailableError,
)
from pricelens.services.market_data.interface import PriceDataProvider
from pricelens.services.market_data.series import PriceSeries

logger = logging.getLogger(__name__)

SERVICE_NAME = "YahooFinance"

INFO_FIELDS = {
    "market_cap": "marketCap",
    "pe_ratio": "trailingPE",
    "eps": "trailingEps",
    "analyst_target_price": "targetMeanPrice",
    "year_high": "fiftyTwoWeekHigh",
    "year_low": "fiftyTwoWeekLow",
    "description": "longBusinessSummary",
}


def get_yahoo_symbol(request: SymbolRequest) -> str:
    """Convert a normalized request to Yahoo Finance format."""
    if request.asset_class == AssetClass.FOREX:
        return f"{request.base}{request.quote}=X"
    if request.asset_class == AssetClass.CRYPTO:
        return f"{request.base}-{request.quote}"
    return request.symbol


def history_to_series(history, symbol: str) -> PriceSeries:
    """Convert a yfinance history DataFrame to a PriceSeries."""
    if history is None or history.empty:
        raise NoDataError(SERVICE_NAME, f"No data returned for {symbol}", {"symbol": symbol})

    return PriceSeries.from_time_series(history.to_dict(orient="index"), "Close")


def info_to_fundamentals(info: Optional[dict[str, Any]]) -> Optional[FundamentalAnalysis]:
    if not info:
        return None

    fundamentals = FundamentalAnalysis(
        **{field: info.get(key) for field, key in INFO_FIELDS.items()}
    )
    return None if fundamentals.is_empty() else fundamentals


class YahooFinanceProvider(PriceDataProvider):
    """yfinance adapter. yfinance is blocking, so calls run in the default executor."""

    def __init__(self, period: str = "1y", interval: str = "1d", timeout: float = 15.0):
        self.period = period
        self.interval = interval
        self.timeout = timeout

    @property
    def name(self) -> ProviderName:
        return ProviderName.YAHOO

    async def _run(self, fn, symbol: str):
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(None, fn), timeout=self.timeout
            )
        except YFRateLimitError as e:
            logger.warning(f"Yahoo Finance rate limit hit for {symbol}")
            raise RateLimitError(SERVICE_NAME, str(e), {"symbol": symbol}) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Yahoo Finance timed out for {symbol}")
            raise UpstreamUnavailableError(SERVICE_NAME, f"Timed out fetching {symbol}") from e
        except Exception as e:
            logger.error(f"Error fetching {symbol} from Yahoo Finance: {e}")
            raise UpstreamUnavailableError(SERVICE_NAME, f"Failed to fetch {symbol}: {e}") from e

    async def fetch_price_history(self, request: SymbolRequest) -> PriceSeries:
        yahoo_symbol = get_yahoo_symbol(request)
        logger.info(f"Fetching {yahoo_symbol} from Yahoo Finance...")

        ticker = yf.Ticker(yahoo_symbol)
        history = await self._run(
            lambda: ticker.history(period=self.period, interval=self.interval),
            yahoo_symbol,
        )

        if history is None or history.empty:
            logger.warning(f"No data returned for {yahoo_symbol}")

        series = history_to_series(history, yahoo_symbol)
        logger.info(f"Yahoo Finance: {yahoo_symbol} {len(series)} closes, last {series.last_close:.2f}")
        return series

    async def fetch_fundamentals(self, request: SymbolRequest) -> Optional[FundamentalAnalysis]:
        if request.asset_class != AssetClass.STOCK or request.is_index:
            return None

        yahoo_symbol = get_yahoo_symbol(request)
        ticker = yf.Ticker(yahoo_symbol)
        info = await self._run(lambda: ticker.info, yahoo_symbol)
        return info_to_fundamentals(info)

    async def health_check(self) -> bool:
        """Check Yahoo Finance returns data for a liquid symbol."""
        try:
            ticker = yf.Ticker("^NSEI")
            hist = await self._run(lambda: ticker.history(period="5d"), "^NSEI")
            return not hist.empty
        except Exception as e:
            logger.error(f"Yahoo Finance health check failed: {e}")
            return False
