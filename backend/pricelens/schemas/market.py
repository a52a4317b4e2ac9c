"""
CONTRACT 1: Market Data Request

Input: (ticker, asset class) from the client
Output: SymbolRequest

A SymbolRequest is the provider-ready form of a user ticker. It is produced
by the SymbolNormalizer and consumed by every price data provider.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class AssetClass(str, Enum):
    STOCK = "stock"
    CRYPTO = "crypto"
    FOREX = "forex"


class ProviderName(str, Enum):
    ALPHA_VANTAGE = "alphavantage"
    YAHOO = "yahoo"


# =============================================================================
# SymbolRequest
# =============================================================================


class SymbolRequest(BaseModel):
    """
    Normalized symbol ready for an upstream provider.
    Sent by: SymbolNormalizer
    Received by: PriceDataProvider
    """

    model_config = ConfigDict(frozen=True)

    ticker: str = Field(..., description="User ticker, upper-cased")
    symbol: str = Field(..., description="Provider symbol (suffix / alias applied)")
    asset_class: AssetClass
    base: str = Field(..., description="Base instrument (ticker, coin or base currency)")
    quote: str = Field(..., description="Quote currency for crypto / forex")
    currency: str = Field(..., min_length=3, max_length=3, description="Display currency")
    is_index: bool = False
