"""
Indicator Engine Service Implementation

Turns a PriceSeries into TechnicalAnalysis.
Pure Python/NumPy, synchronous and stateless: safe to share across requests.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from pricelens.schemas.analysis import (
    BollingerBandsResult,
    MACDHistoryPoint,
    MACDResult,
    RSIResult,
    TechnicalAnalysis,
)
from pricelens.services.indicators.calculations import (
    bollinger_bands,
    classify_bollinger,
    classify_macd,
    classify_rsi,
    ema,
    macd,
    rsi,
    sma,
)
from pricelens.services.market_data.series import PriceSeries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndicatorConfig:
    """Windows used when building a report."""

    ema_windows: tuple[int, ...] = (5, 9)
    sma_windows: tuple[int, ...] = (50,)
    rsi_period: int = 14
    bollinger_period: int = 20
    bollinger_std_dev: float = 2.0
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    macd_history_length: int = 30


class IndicatorService:
    """
    Indicator Engine Service.

    Every indicator is computed independently. One that lacks history
    comes back as None and never aborts the others.
    """

    def __init__(self, config: Optional[IndicatorConfig] = None):
        self.config = config or IndicatorConfig()

    @property
    def name(self) -> str:
        return "IndicatorService"

    def analyze(self, series: PriceSeries) -> TechnicalAnalysis:
        """Calculate all configured indicators for one series."""
        return TechnicalAnalysis(
            rsi=self.calculate_rsi(series),
            macd=self.calculate_macd(series),
            bollinger_bands=self.calculate_bollinger_bands(series),
            moving_averages=self.calculate_moving_averages(series),
        )

    def calculate_moving_averages(self, series: PriceSeries) -> dict[str, Optional[float]]:
        closes = series.oldest_first
        averages: dict[str, Optional[float]] = {}

        for window in self.config.ema_windows:
            values = ema(closes, window)
            averages[f"ema{window}"] = float(values[-1]) if len(values) else None

        for window in self.config.sma_windows:
            averages[f"sma{window}"] = sma(closes, window)

        undetermined = [k for k, v in averages.items() if v is None]
        if undetermined:
            logger.debug(
                f"Moving averages undetermined with {len(series)} samples: {undetermined}"
            )
        return averages

    def calculate_rsi(self, series: PriceSeries) -> Optional[RSIResult]:
        value = rsi(series.oldest_first, self.config.rsi_period)
        if value is None:
            logger.debug(f"RSI undetermined with {len(series)} samples")
            return None
        return RSIResult(value=value, signal=classify_rsi(value))

    def calculate_bollinger_bands(self, series: PriceSeries) -> Optional[BollingerBandsResult]:
        bands = bollinger_bands(
            series.oldest_first,
            self.config.bollinger_period,
            self.config.bollinger_std_dev,
        )
        if bands is None:
            logger.debug(f"Bollinger Bands undetermined with {len(series)} samples")
            return None

        upper, middle, lower, _ = bands
        return BollingerBandsResult(
            upper=upper,
            middle=middle,
            lower=lower,
            signal=classify_bollinger(series.last_close, upper, lower),
        )

    def calculate_macd(self, series: PriceSeries) -> Optional[MACDResult]:
        lines = macd(
            series.oldest_first,
            self.config.macd_fast,
            self.config.macd_slow,
            self.config.macd_signal,
        )
        if lines is None:
            logger.debug(f"MACD undetermined with {len(series)} samples")
            return None

        macd_line, signal_line, histogram = lines
        n = min(self.config.macd_history_length, len(series))
        history = [
            MACDHistoryPoint(
                date=day,
                macd=float(m),
                signal=float(s),
                histogram=float(h),
            )
            for day, m, s, h in zip(
                series.dates[-n:] if n else (),
                macd_line[-n:],
                signal_line[-n:],
                histogram[-n:],
            )
        ]

        current_macd = float(macd_line[-1])
        current_signal = float(signal_line[-1])
        current_hist = float(histogram[-1])

        return MACDResult(
            macd=current_macd,
            signal=current_signal,
            histogram=current_hist,
            analysis=classify_macd(current_macd, current_signal, current_hist),
            history=history,
        )


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        from pricelens.core.config import settings

        _service_instance = IndicatorService(
            IndicatorConfig(
                ema_windows=tuple(settings.ema_windows),
                sma_windows=tuple(settings.sma_windows),
                rsi_period=settings.rsi_period,
                bollinger_period=settings.bollinger_period,
                macd_history_length=settings.macd_history_length,
            )
        )
    return _service_instance
