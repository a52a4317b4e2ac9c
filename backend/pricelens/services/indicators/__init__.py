"""
Indicator Engine Service

CONTRACT:
    Input:  PriceSeries (oldest-first closes)
    Output: TechnicalAnalysis

RESPONSIBILITIES:
    - SMA / EMA moving averages
    - RSI (Wilder smoothing) with zone
    - Bollinger Bands with band signal
    - MACD line / signal / histogram with bounded history

PURE PYTHON - Uses NumPy, no I/O, no shared state.
"""

from pricelens.services.indicators.service import (
    IndicatorConfig,
    IndicatorService,
    get_indicator_service,
)

__all__ = [
    "IndicatorConfig",
    "IndicatorService",
    "get_indicator_service",
]
