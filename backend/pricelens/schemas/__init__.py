"""
Data Schemas

- market: asset classes and the normalized SymbolRequest
- analysis: indicator results and the AnalysisReport response
"""

from pricelens.schemas.market import AssetClass, ProviderName, SymbolRequest
from pricelens.schemas.analysis import (
    AnalysisReport,
    BollingerBandsResult,
    BollingerSignal,
    FundamentalAnalysis,
    MACDAnalysis,
    MACDHistoryPoint,
    MACDResult,
    RSIResult,
    RSISignal,
    TechnicalAnalysis,
)

__all__ = [
    "AssetClass",
    "ProviderName",
    "SymbolRequest",
    "AnalysisReport",
    "BollingerBandsResult",
    "BollingerSignal",
    "FundamentalAnalysis",
    "MACDAnalysis",
    "MACDHistoryPoint",
    "MACDResult",
    "RSIResult",
    "RSISignal",
    "TechnicalAnalysis",
]
