"""
Analysis Service Interface

Defines the contract for the request-level analysis layer.
"""

from abc import abstractmethod

from pydantic import BaseModel, Field

from pricelens.services.base import BaseService
from pricelens.schemas.analysis import AnalysisReport


class AnalysisRequest(BaseModel):
    """Client request: a ticker and its asset class."""

    ticker: str = Field(..., description="e.g. RELIANCE, BTC, EURUSD, NIFTY")
    asset_class: str = Field(..., description="stock / crypto / forex")


class AnalysisServiceInterface(BaseService[AnalysisRequest, AnalysisReport]):
    """
    Analysis Service Contract.

    INPUT: AnalysisRequest
        - ticker: user ticker
        - asset_class: stock / crypto / forex

    OUTPUT: AnalysisReport
        - ticker, lastClose, currency
        - technicalAnalysis (RSI, MACD, Bollinger Bands, moving averages)
        - fundamentalAnalysis (equities only, when the provider has it)

    RAISES:
        - InvalidTickerError / InvalidAssetClassError
        - NoDataError / InsufficientDataError
        - RateLimitError
        - UpstreamUnavailableError
    """

    @property
    def name(self) -> str:
        return "AnalysisService"

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> AnalysisReport:
        """Fetch prices and build the report."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the configured price provider."""
        pass
