"""
Analysis Service

CONTRACT:
    Input:  AnalysisRequest (ticker, asset class)
    Output: AnalysisReport

Composes market_data (normalize + fetch) with the indicator engine.
"""

from pricelens.services.analysis.interface import AnalysisRequest, AnalysisServiceInterface
from pricelens.services.analysis.report import build_report
from pricelens.services.analysis.service import (
    AnalysisService,
    close_analysis_service,
    get_analysis_service,
)

__all__ = [
    "AnalysisRequest",
    "AnalysisServiceInterface",
    "AnalysisService",
    "build_report",
    "close_analysis_service",
    "get_analysis_service",
]
