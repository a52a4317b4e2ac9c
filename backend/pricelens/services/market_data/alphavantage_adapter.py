"""
Alpha Vantage Data Adapter

Fetches daily series for stocks, crypto and forex from Alpha Vantage.

Alpha Vantage signals throttling and bad symbols inside a 200 response:
  - "Note" / "Information" (call frequency) -> RateLimitError
  - "Error Message" or missing series key    -> NoDataError
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

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

SERVICE_NAME = "AlphaVantage"

# asset class -> (function, series key)
SERIES_FUNCTIONS = {
    AssetClass.STOCK: ("TIME_SERIES_DAILY", "Time Series (Daily)"),
    AssetClass.CRYPTO: ("DIGITAL_CURRENCY_DAILY", "Time Series (Digital Currency Daily)"),
    AssetClass.FOREX: ("FX_DAILY", "Time Series FX (Daily)"),
}

RATE_LIMIT_MARKERS = ("call frequency", "rate limit", "requests per")

OVERVIEW_FIELDS = {
    "market_cap": "MarketCapitalization",
    "pe_ratio": "PERatio",
    "eps": "EPS",
    "analyst_target_price": "AnalystTargetPrice",
    "year_high": "52WeekHigh",
    "year_low": "52WeekLow",
    "description": "Description",
}


def build_history_params(
    request: SymbolRequest, output_size: str = "compact"
) -> tuple[dict[str, str], str, tuple[str, ...]]:
    """
    Query params, series key and close field(s) for a daily series.

    Crypto close field names carry the market currency on older API
    versions ("4a. close (USD)") and not on newer ones ("4. close").
    """
    function, series_key = SERIES_FUNCTIONS[request.asset_class]

    if request.asset_class == AssetClass.STOCK:
        params = {"function": function, "symbol": request.symbol, "outputsize": output_size}
        close_fields = ("4. close",)
    elif request.asset_class == AssetClass.CRYPTO:
        params = {"function": function, "symbol": request.base, "market": request.quote}
        close_fields = (f"4a. close ({request.quote})", "4. close")
    else:
        params = {
            "function": function,
            "from_symbol": request.base,
            "to_symbol": request.quote,
            "outputsize": output_size,
        }
        close_fields = ("4. close",)

    return params, series_key, close_fields


def check_payload_errors(payload: dict[str, Any], symbol: str) -> None:
    """Raise the matching error for an in-band Alpha Vantage failure."""
    note = payload.get("Note")
    if note:
        raise RateLimitError(SERVICE_NAME, str(note), {"symbol": symbol})

    info = payload.get("Information")
    if info and any(marker in str(info).lower() for marker in RATE_LIMIT_MARKERS):
        raise RateLimitError(SERVICE_NAME, str(info), {"symbol": symbol})

    error = payload.get("Error Message")
    if error:
        raise NoDataError(SERVICE_NAME, f"No data for {symbol}: {error}", {"symbol": symbol})

    if info:
        raise NoDataError(SERVICE_NAME, f"No data for {symbol}: {info}", {"symbol": symbol})


def parse_time_series_payload(
    payload: dict[str, Any],
    series_key: str,
    close_fields: tuple[str, ...],
    symbol: str,
) -> PriceSeries:
    """Interpret a daily time-series response as a PriceSeries."""
    check_payload_errors(payload, symbol)

    time_series = payload.get(series_key)
    if not time_series or not isinstance(time_series, dict):
        raise NoDataError(
            SERVICE_NAME, f"No data for {symbol}: invalid symbol", {"symbol": symbol}
        )

    return PriceSeries.from_time_series(time_series, close_fields)


def parse_overview_payload(payload: dict[str, Any]) -> Optional[FundamentalAnalysis]:
    """OVERVIEW response -> fundamentals, None when the symbol is unknown."""
    if not payload or payload.get("Note") or payload.get("Error Message"):
        return None
    if not payload.get("Symbol"):
        return None

    fundamentals = FundamentalAnalysis(
        **{field: payload.get(key) for field, key in OVERVIEW_FIELDS.items()}
    )
    return None if fundamentals.is_empty() else fundamentals


class AlphaVantageProvider(PriceDataProvider):
    """Alpha Vantage REST adapter. The API key is passed in, never read from env."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.alphavantage.co/query",
        output_size: str = "compact",
        timeout: float = 15.0,
    ):
        if not api_key:
            raise ValueError("Alpha Vantage API key is required")
        self._api_key = api_key
        self.base_url = base_url
        self.output_size = output_size
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> ProviderName:
        return ProviderName.ALPHA_VANTAGE

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_json(self, params: dict[str, str]) -> dict[str, Any]:
        session = await self._ensure_session()
        function = params.get("function")

        try:
            async with session.get(
                self.base_url, params={**params, "apikey": self._api_key}
            ) as resp:
                if resp.status == 429:
                    raise RateLimitError(SERVICE_NAME, "HTTP 429 from Alpha Vantage")
                if resp.status >= 400:
                    raise UpstreamUnavailableError(
                        SERVICE_NAME,
                        f"{function} failed with HTTP {resp.status}",
                        {"status": resp.status},
                    )
                payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Alpha Vantage {function} request failed: {e}")
            raise UpstreamUnavailableError(SERVICE_NAME, f"{function} request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Alpha Vantage {function} returned invalid JSON: {e}")
            raise UpstreamUnavailableError(SERVICE_NAME, f"{function} returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise UpstreamUnavailableError(SERVICE_NAME, f"{function} returned unexpected payload")
        return payload

    async def fetch_price_history(self, request: SymbolRequest) -> PriceSeries:
        if request.is_index:
            raise NoDataError(
                SERVICE_NAME,
                f"Index {request.ticker} is not available from Alpha Vantage",
                {"symbol": request.symbol},
            )

        params, series_key, close_fields = build_history_params(request, self.output_size)
        logger.info(f"Fetching {request.symbol} ({params['function']}) from Alpha Vantage...")

        payload = await self._get_json(params)
        try:
            series = parse_time_series_payload(payload, series_key, close_fields, request.symbol)
        except RateLimitError:
            logger.warning(f"Alpha Vantage rate limit hit for {request.symbol}")
            raise

        logger.info(f"Alpha Vantage: {request.symbol} {len(series)} closes, last {series.last_close:.2f}")
        return series

    async def fetch_fundamentals(self, request: SymbolRequest) -> Optional[FundamentalAnalysis]:
        if request.asset_class != AssetClass.STOCK or request.is_index:
            return None

        payload = await self._get_json({"function": "OVERVIEW", "symbol": request.symbol})
        fundamentals = parse_overview_payload(payload)
        if fundamentals is None:
            logger.debug(f"No Alpha Vantage overview for {request.symbol}")
        return fundamentals

    async def health_check(self) -> bool:
        """Key is configured; a live call would spend daily quota."""
        return bool(self._api_key)
