"""
Analysis Service Implementation

normalize ticker -> fetch closes -> (equities) fetch fundamentals -> report

The indicator math is synchronous and stateless; only the provider calls
are awaited. Errors other than a failed fundamentals lookup propagate
unchanged to the caller.
"""

import logging
from typing import Optional

from pricelens.schemas.analysis import AnalysisReport, FundamentalAnalysis
from pricelens.schemas.market import AssetClass, SymbolRequest
from pricelens.services.analysis.interface import AnalysisRequest, AnalysisServiceInterface
from pricelens.services.analysis.report import build_report
from pricelens.services.base import ConfigurationError, ServiceError
from pricelens.services.indicators.service import IndicatorService, get_indicator_service
from pricelens.services.market_data.interface import PriceDataProvider
from pricelens.services.market_data.symbols import SymbolNormalizer

logger = logging.getLogger(__name__)


class AnalysisService(AnalysisServiceInterface):
    """
    Analysis Service.

    Collaborators are injected so the provider can be swapped or faked.
    """

    def __init__(
        self,
        provider: PriceDataProvider,
        normalizer: SymbolNormalizer,
        indicator_service: Optional[IndicatorService] = None,
    ):
        self.provider = provider
        self.normalizer = normalizer
        self.indicator_service = indicator_service or get_indicator_service()

    async def execute(self, input_data: AnalysisRequest) -> AnalysisReport:
        request = self.normalizer.normalize(input_data.ticker, input_data.asset_class)

        series = await self.provider.fetch_price_history(request)

        fundamentals = None
        if request.asset_class == AssetClass.STOCK:
            fundamentals = await self._fetch_fundamentals(request)

        report = build_report(
            ticker=request.symbol,
            series=series,
            currency=request.currency,
            indicator_service=self.indicator_service,
            fundamentals=fundamentals,
            asset_class=request.asset_class,
        )

        logger.info(
            f"Analysis for {request.symbol}: {len(series)} closes, "
            f"last {series.last_close:.2f} {request.currency}"
        )
        return report

    async def analyze(self, ticker: str, asset_class: str) -> AnalysisReport:
        return await self.execute(AnalysisRequest(ticker=ticker, asset_class=asset_class))

    async def _fetch_fundamentals(self, request: SymbolRequest) -> Optional[FundamentalAnalysis]:
        """Fundamentals are optional: a failure here leaves them out of the report."""
        try:
            return await self.provider.fetch_fundamentals(request)
        except ServiceError as e:
            logger.warning(f"Fundamentals unavailable for {request.symbol}: {e}")
            return None

    async def health_check(self) -> bool:
        return await self.provider.health_check()

    async def close(self) -> None:
        await self.provider.close()


# Singleton instance
_service_instance: Optional[AnalysisService] = None


def get_analysis_service() -> AnalysisService:
    """Get or create analysis service instance."""
    global _service_instance
    if _service_instance is None:
        from pricelens.core.config import settings
        from pricelens.services.market_data.factory import (
            create_price_provider,
            create_symbol_normalizer,
        )

        try:
            _service_instance = AnalysisService(
                provider=create_price_provider(settings),
                normalizer=create_symbol_normalizer(settings),
            )
        except ValueError as e:
            logger.error(f"Price provider misconfigured: {e}")
            raise ConfigurationError(
                "AnalysisService", "Price provider is misconfigured", {"reason": str(e)}
            ) from e
    return _service_instance


async def close_analysis_service() -> None:
    global _service_instance
    if _service_instance is not None:
        await _service_instance.close()
        _service_instance = None
