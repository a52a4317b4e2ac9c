"""
Market Data Service

CONTRACT:
    Input:  (ticker, asset class)
    Output: PriceSeries (+ optional fundamentals)

RESPONSIBILITIES:
    - Normalize tickers per asset class (index aliases, suffixes, FX pairs)
    - Fetch daily closes from the configured provider
    - Map provider failures to NoData / RateLimit / UpstreamUnavailable

NO CACHING - every request fetches fresh data.
"""

from pricelens.services.market_data.series import PriceSeries
from pricelens.services.market_data.symbols import SymbolNormalizer, parse_asset_class
from pricelens.services.market_data.interface import PriceDataProvider
from pricelens.services.market_data.factory import (
    create_price_provider,
    create_symbol_normalizer,
)

__all__ = [
    "PriceSeries",
    "SymbolNormalizer",
    "parse_asset_class",
    "PriceDataProvider",
    "create_price_provider",
    "create_symbol_normalizer",
]
