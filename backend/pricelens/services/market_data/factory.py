"""
Provider Selection

Builds the configured PriceDataProvider and SymbolNormalizer.
Credentials are read here and passed to the adapter explicitly.
"""

import logging

from pricelens.core.config import Settings
from pricelens.schemas.market import ProviderName
from pricelens.services.market_data.alphavantage_adapter import AlphaVantageProvider
from pricelens.services.market_data.interface import PriceDataProvider
from pricelens.services.market_data.symbols import SymbolNormalizer
from pricelens.services.market_data.yahoo_adapter import YahooFinanceProvider

logger = logging.getLogger(__name__)

# Exchange suffix for unqualified equities when DEFAULT_MARKET_SUFFIX is unset.
# Alpha Vantage takes bare US tickers.
DEFAULT_MARKET_SUFFIXES = {
    ProviderName.YAHOO: ".NS",
    ProviderName.ALPHA_VANTAGE: "",
}


def get_provider_name(settings: Settings) -> ProviderName:
    try:
        return ProviderName(settings.price_provider.strip().lower())
    except ValueError:
        raise ValueError(
            f"Unknown price provider {settings.price_provider!r}; "
            f"expected one of {[p.value for p in ProviderName]}"
        )


def create_price_provider(settings: Settings) -> PriceDataProvider:
    """Create the provider named by settings.price_provider."""
    provider_name = get_provider_name(settings)

    if provider_name == ProviderName.ALPHA_VANTAGE:
        if not settings.alpha_vantage_api_key:
            raise ValueError(
                "ALPHA_VANTAGE_API_KEY must be set when PRICE_PROVIDER=alphavantage"
            )
        provider: PriceDataProvider = AlphaVantageProvider(
            api_key=settings.alpha_vantage_api_key,
            base_url=settings.alpha_vantage_base_url,
            output_size=settings.alpha_vantage_output_size,
            timeout=settings.upstream_timeout_seconds,
        )
    else:
        provider = YahooFinanceProvider(timeout=settings.upstream_timeout_seconds)

    logger.info(f"Using price provider: {provider_name.value}")
    return provider


def create_symbol_normalizer(settings: Settings) -> SymbolNormalizer:
    """Normalizer whose equity suffix matches the configured provider."""
    suffix = settings.default_market_suffix
    if suffix is None:
        suffix = DEFAULT_MARKET_SUFFIXES[get_provider_name(settings)]

    return SymbolNormalizer(
        default_market_suffix=suffix,
        crypto_quote_currency=settings.crypto_quote_currency,
        default_currency=settings.default_currency,
    )
