"""
Analysis Report Assembly

Pure composition of indicator results and optional fundamentals.
No I/O: fundamentals are supplied by the caller, never fetched here.
"""

from typing import Optional

from pricelens.schemas.analysis import AnalysisReport, FundamentalAnalysis
from pricelens.schemas.market import AssetClass
from pricelens.services.indicators.service import IndicatorService
from pricelens.services.market_data.series import PriceSeries


def build_report(
    ticker: str,
    series: PriceSeries,
    currency: str,
    indicator_service: IndicatorService,
    fundamentals: Optional[FundamentalAnalysis] = None,
    asset_class: AssetClass = AssetClass.STOCK,
) -> AnalysisReport:
    """
    Build the report for one series.

    lastClose is taken from the newest sample of the same series the
    indicators were computed on. Fundamentals only apply to equities.
    """
    if asset_class != AssetClass.STOCK:
        fundamentals = None

    return AnalysisReport(
        ticker=ticker.upper(),
        last_close=series.last_close,
        currency=currency.upper(),
        technical_analysis=indicator_service.analyze(series),
        fundamental_analysis=fundamentals,
    )
