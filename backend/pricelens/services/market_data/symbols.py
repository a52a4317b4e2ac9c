"""
Symbol Normalizer

Maps a user (ticker, asset class) pair to the SymbolRequest every
provider consumes.

Equities without an exchange qualifier get the configured default-market
suffix (".NS" for NSE by default, "" to disable). Index aliases resolve to
Yahoo Finance reserved index symbols.
"""

import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from pricelens.schemas.market import AssetClass, SymbolRequest
from pricelens.services.base import InvalidAssetClassError, InvalidTickerError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexAlias:
    symbol: str
    currency: str


INDEX_ALIASES: dict[str, IndexAlias] = {
    # Broad market
    "NIFTY": IndexAlias("^NSEI", "INR"),
    "NIFTY50": IndexAlias("^NSEI", "INR"),
    "SENSEX": IndexAlias("^BSESN", "INR"),
    # Banking
    "BANKNIFTY": IndexAlias("^NSEBANK", "INR"),
    # Benchmarks
    "SPX": IndexAlias("^GSPC", "USD"),
    "SP500": IndexAlias("^GSPC", "USD"),
    "DJI": IndexAlias("^DJI", "USD"),
    "NASDAQ": IndexAlias("^IXIC", "USD"),
}

# Exchange suffix -> trading currency
SUFFIX_CURRENCIES = {
    ".NS": "INR",
    ".BO": "INR",
    ".L": "GBP",
    ".T": "JPY",
}

ASSET_CLASS_ALIASES = {
    "stock": AssetClass.STOCK,
    "equity": AssetClass.STOCK,
    "index": AssetClass.STOCK,
    "crypto": AssetClass.CRYPTO,
    "forex": AssetClass.FOREX,
    "fx": AssetClass.FOREX,
}

FOREX_PAIR = re.compile(r"[A-Z]{6}")
CURRENCY_CODE = re.compile(r"[A-Z]{3}")


def parse_asset_class(value: Union[str, AssetClass, None]) -> AssetClass:
    """Parse a client-supplied asset class (case-insensitive)."""
    if isinstance(value, AssetClass):
        return value
    asset_class = ASSET_CLASS_ALIASES.get((value or "").strip().lower())
    if asset_class is None:
        raise InvalidAssetClassError(
            "SymbolNormalizer", f"Invalid asset type: {value!r}"
        )
    return asset_class


class SymbolNormalizer:
    """Normalizes tickers per asset class."""

    def __init__(
        self,
        default_market_suffix: str = ".NS",
        crypto_quote_currency: str = "USD",
        default_currency: str = "USD",
        index_aliases: Optional[Mapping[str, IndexAlias]] = None,
    ):
        self.default_market_suffix = default_market_suffix or ""
        self.crypto_quote_currency = crypto_quote_currency.upper()
        self.default_currency = default_currency.upper()
        self.index_aliases = dict(INDEX_ALIASES if index_aliases is None else index_aliases)

    def normalize(
        self, ticker: Optional[str], asset_class: Union[str, AssetClass, None]
    ) -> SymbolRequest:
        asset = parse_asset_class(asset_class)
        cleaned = (ticker or "").strip().upper()
        if not cleaned:
            raise InvalidTickerError("SymbolNormalizer", "Ticker is required")

        if asset == AssetClass.STOCK:
            request = self._normalize_equity(cleaned)
        elif asset == AssetClass.CRYPTO:
            request = self._normalize_crypto(cleaned)
        else:
            request = self._normalize_forex(cleaned)

        logger.debug(f"Normalized {cleaned} ({asset.value}) -> {request.symbol}")
        return request

    def _normalize_equity(self, ticker: str) -> SymbolRequest:
        alias = self.index_aliases.get(ticker)
        if alias is not None:
            return SymbolRequest(
                ticker=ticker,
                symbol=alias.symbol,
                asset_class=AssetClass.STOCK,
                base=ticker,
                quote=alias.currency,
                currency=alias.currency,
                is_index=True,
            )

        if "." in ticker or ticker.startswith("^"):
            symbol = ticker
        else:
            symbol = f"{ticker}{self.default_market_suffix}"

        currency = self._currency_for(symbol)
        return SymbolRequest(
            ticker=ticker,
            symbol=symbol,
            asset_class=AssetClass.STOCK,
            base=ticker.split(".")[0],
            quote=currency,
            currency=currency,
            is_index=symbol.startswith("^"),
        )

    def _normalize_crypto(self, ticker: str) -> SymbolRequest:
        if "-" in ticker:
            base, _, quote = ticker.partition("-")
        else:
            base, quote = ticker, self.crypto_quote_currency

        if not base or not CURRENCY_CODE.fullmatch(quote):
            raise InvalidTickerError(
                "SymbolNormalizer", f"Invalid crypto ticker: {ticker}"
            )

        return SymbolRequest(
            ticker=ticker,
            symbol=f"{base}-{quote}",
            asset_class=AssetClass.CRYPTO,
            base=base,
            quote=quote,
            currency=quote,
        )

    def _normalize_forex(self, ticker: str) -> SymbolRequest:
        pair = ticker.replace("/", "")
        if pair.endswith("=X"):
            pair = pair[:-2]

        if not FOREX_PAIR.fullmatch(pair):
            raise InvalidTickerError(
                "SymbolNormalizer",
                f"Forex ticker must be a 6-letter pair like EURUSD, got {ticker!r}",
            )

        base, quote = pair[:3], pair[3:]
        return SymbolRequest(
            ticker=ticker,
            symbol=pair,
            asset_class=AssetClass.FOREX,
            base=base,
            quote=quote,
            currency=quote,
        )

    def _currency_for(self, symbol: str) -> str:
        for suffix, currency in SUFFIX_CURRENCIES.items():
            if symbol.endswith(suffix):
                return currency
        return self.default_currency
