"""
Technical Indicator Calculations

Pure NumPy implementations of technical indicators.
All math is deterministic. All inputs are closing prices OLDEST-FIRST.

Short history never raises: scalar indicators return None and series
indicators return an empty array.
"""

import numpy as np
from typing import Optional

from pricelens.schemas.analysis import BollingerSignal, MACDAnalysis, RSISignal


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(closes: np.ndarray, window: int) -> Optional[float]:
    """Simple Moving Average of the most recent `window` closes."""
    if window <= 0 or len(closes) < window:
        return None
    return float(np.mean(closes[-window:]))


def ema(closes: np.ndarray, window: int) -> np.ndarray:
    """
    Exponential Moving Average, one value per input sample.

    Seeded from the OLDEST close rather than an SMA of the first window,
    so the earliest values lean toward that first price.
    """
    if window <= 0 or len(closes) < window:
        return np.array([], dtype=float)

    k = 2 / (window + 1)
    result = np.empty(len(closes), dtype=float)
    result[0] = closes[0]

    # close*k + prev*(1-k), arranged so a flat series stays exactly flat
    for i in range(1, len(closes)):
        result[i] = (closes[i] - result[i - 1]) * k + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> Optional[float]:
    """
    Relative Strength Index (Wilder smoothing) at the most recent close.

    Needs strictly more than `period` closes. When the smoothed average
    loss is exactly zero, RSI is defined as 100.
    """
    if period <= 0 or len(closes) <= period:
        return None

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # Seed from the oldest `period` deltas
    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return float(100 - (100 / (1 + rs)))


def classify_rsi(value: float) -> RSISignal:
    """Zone for an RSI value. 100 means no losses at all in the window."""
    if value >= 100:
        return RSISignal.EXTREMELY_OVERBOUGHT
    if value > 70:
        return RSISignal.OVERBOUGHT
    if value < 30:
        return RSISignal.OVERSOLD
    return RSISignal.NEUTRAL


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> Optional[tuple[np.ndarray, np.ndarray, np.ndarray]]:
    """
    MACD (Moving Average Convergence Divergence).

    Returns: (macd_line, signal_line, histogram), index-aligned with closes,
    or None with fewer than `slow_period` closes.
    """
    if len(closes) < slow_period:
        return None

    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    # Signal line is EMA of MACD line
    signal_line = ema(macd_line, signal_period)

    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


def classify_macd(macd_value: float, signal_value: float, histogram: float) -> MACDAnalysis:
    if macd_value > signal_value and histogram > 0:
        return MACDAnalysis.BULLISH
    if macd_value < signal_value and histogram < 0:
        return MACDAnalysis.BEARISH
    return MACDAnalysis.NEUTRAL


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> Optional[tuple[float, float, float, float]]:
    """
    Bollinger Bands over the most recent `period` closes.

    Uses the population standard deviation (divisor = period).

    Returns: (upper, middle, lower, stddev)
    """
    middle = sma(closes, period)
    if middle is None:
        return None

    std = float(np.std(closes[-period:]))
    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    return upper, middle, lower, std


def classify_bollinger(last_close: float, upper: float, lower: float) -> BollingerSignal:
    if last_close > upper:
        return BollingerSignal.ABOVE
    if last_close < lower:
        return BollingerSignal.BELOW
    return BollingerSignal.INSIDE
