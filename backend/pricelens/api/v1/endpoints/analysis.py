"""
Analysis API Endpoints

Technical (and, for equities, fundamental) analysis for one ticker.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from pricelens.services.analysis import AnalysisRequest, AnalysisService, get_analysis_service
from pricelens.services.base import (
    InsufficientDataError,
    NoDataError,
    RateLimitError,
    ServiceError,
    UpstreamUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Service error -> HTTP status
ERROR_STATUS = (
    (ValidationError, 400),
    (NoDataError, 404),
    (InsufficientDataError, 404),
    (RateLimitError, 429),
    (UpstreamUnavailableError, 502),
)


def status_for(error: ServiceError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return 500


@router.get("")
async def get_analysis(
    ticker: Optional[str] = Query(default=None, description="e.g. RELIANCE, BTC, EURUSD"),
    asset_class: Optional[str] = Query(
        default=None, alias="assetClass", description="stock / crypto / forex"
    ),
    asset_type: Optional[str] = Query(
        default=None, alias="type", description="Alias of assetClass"
    ),
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    Get the analysis report for a ticker.

    Returns:
        - lastClose and currency
        - RSI, MACD (with histogram history), Bollinger Bands
        - Configured EMA / SMA values
        - Fundamentals for equities when available
    """
    asset = asset_class or asset_type
    if not ticker or not ticker.strip() or not asset:
        raise HTTPException(status_code=400, detail="Missing required parameters: ticker, assetClass")

    try:
        report = await service.execute(AnalysisRequest(ticker=ticker, asset_class=asset))
    except ServiceError as e:
        status_code = status_for(e)
        if status_code == 429:
            logger.warning(f"Rate limited while analysing {ticker}: {e.message}")
        else:
            logger.info(f"Analysis for {ticker} failed ({status_code}): {e.message}")
        raise HTTPException(status_code=status_code, detail=e.message)
    except Exception:
        logger.exception(f"Unexpected error analysing {ticker}")
        raise HTTPException(status_code=500, detail="An unexpected server error occurred.")

    return report.to_response()
