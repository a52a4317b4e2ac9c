"""
Price Data Provider Interface

One implementation per upstream. Handlers depend only on this contract,
so switching provider is a configuration change.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pricelens.schemas.analysis import FundamentalAnalysis
from pricelens.schemas.market import ProviderName, SymbolRequest
from pricelens.services.market_data.series import PriceSeries


class PriceDataProvider(ABC):
    """
    Price Data Provider Contract.

    INPUT: SymbolRequest (from SymbolNormalizer)

    OUTPUT:
        - fetch_price_history: PriceSeries (oldest-first)
        - fetch_fundamentals: FundamentalAnalysis or None

    RAISES:
        - NoDataError: upstream has nothing for the symbol
        - RateLimitError: upstream throttled the request
        - UpstreamUnavailableError: transport or parse failure

    Providers never retry; retry policy belongs to the caller.
    """

    @property
    @abstractmethod
    def name(self) -> ProviderName:
        pass

    @abstractmethod
    async def fetch_price_history(self, request: SymbolRequest) -> PriceSeries:
        """Fetch daily closes for the symbol."""
        pass

    @abstractmethod
    async def fetch_fundamentals(
        self, request: SymbolRequest
    ) -> Optional[FundamentalAnalysis]:
        """Fetch equity fundamentals, None when unavailable."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    async def close(self) -> None:
        """Release any open connections."""
        return None
