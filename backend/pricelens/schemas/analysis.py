"""
CONTRACT 2: Analysis Report

Input: PriceSeries (+ optional fundamentals)
Output: AnalysisReport

Indicator values are carried as floats internally and serialized as
2-decimal strings so clients never see floating-point display drift.
An indicator that lacks history is None ("undetermined") and serializes
as null.
"""

import datetime as dt
import re
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_serializer,
    model_validator,
)


def _two_decimals(value: float) -> str:
    # + 0.0 turns -0.0 into 0.0 so tiny negatives print "0.00"
    return f"{round(value, 2) + 0.0:.2f}"


TwoDecimal = Annotated[
    float, PlainSerializer(_two_decimals, return_type=str, when_used="always")
]

MOVING_AVERAGE_KEY = re.compile(r"(ema|sma)\d+")


# =============================================================================
# ENUMS
# =============================================================================


class RSISignal(str, Enum):
    OVERSOLD = "Oversold"
    NEUTRAL = "Neutral"
    OVERBOUGHT = "Overbought"
    EXTREMELY_OVERBOUGHT = "Extremely Overbought"


class BollingerSignal(str, Enum):
    ABOVE = "Above Bands"
    INSIDE = "In Bands"
    BELOW = "Below Bands"


class MACDAnalysis(str, Enum):
    BULLISH = "Bullish Momentum"
    BEARISH = "Bearish Momentum"
    NEUTRAL = "Neutral"


# =============================================================================
# OUTPUT: Indicator Components
# =============================================================================


class RSIResult(BaseModel):
    """Wilder-smoothed RSI with its zone."""

    value: TwoDecimal = Field(..., ge=0, le=100)
    signal: RSISignal


class BollingerBandsResult(BaseModel):
    """Bollinger Bands (SMA +/- 2 population std-dev)."""

    upper: TwoDecimal
    middle: TwoDecimal
    lower: TwoDecimal
    signal: BollingerSignal


class MACDHistoryPoint(BaseModel):
    """One MACD point for charting."""

    date: dt.date
    macd: TwoDecimal
    signal: TwoDecimal
    histogram: TwoDecimal


class MACDResult(BaseModel):
    """MACD values at the most recent sample plus a bounded history."""

    macd: TwoDecimal
    signal: TwoDecimal
    histogram: TwoDecimal
    analysis: MACDAnalysis
    history: list[MACDHistoryPoint] = Field(
        default_factory=list, description="Oldest-first, bounded"
    )


class TechnicalAnalysis(BaseModel):
    """
    All technical indicators for one price series.

    Moving averages are configurable, so they are held in a dict keyed
    "ema<N>" / "sma<N>" and flattened into the JSON object.
    """

    model_config = ConfigDict(populate_by_name=True)

    rsi: Optional[RSIResult] = None
    macd: Optional[MACDResult] = None
    bollinger_bands: Optional[BollingerBandsResult] = Field(
        default=None, alias="bollingerBands"
    )
    moving_averages: dict[str, Optional[TwoDecimal]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_moving_averages(cls, data: Any) -> Any:
        if isinstance(data, dict) and "moving_averages" not in data:
            data = dict(data)
            data["moving_averages"] = {
                key: data.pop(key)
                for key in list(data)
                if MOVING_AVERAGE_KEY.fullmatch(key)
            }
        return data

    @model_serializer(mode="wrap")
    def _flatten_moving_averages(self, handler) -> dict[str, Any]:
        data = handler(self)
        data.update(data.pop("moving_averages", {}))
        return data


class FundamentalAnalysis(BaseModel):
    """Equity fundamentals, passed through from the provider."""

    model_config = ConfigDict(populate_by_name=True)

    market_cap: Optional[float] = Field(default=None, alias="marketCap")
    pe_ratio: Optional[float] = Field(default=None, alias="peRatio")
    eps: Optional[float] = None
    analyst_target_price: Optional[float] = Field(
        default=None, alias="analystTargetPrice"
    )
    year_high: Optional[float] = Field(default=None, alias="yearHigh")
    year_low: Optional[float] = Field(default=None, alias="yearLow")
    description: Optional[str] = None

    @field_validator(
        "market_cap",
        "pe_ratio",
        "eps",
        "analyst_target_price",
        "year_high",
        "year_low",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # Providers send "None", "-" or "" for missing numbers
        if isinstance(value, str) and value.strip() in {"", "-", "None", "N/A"}:
            return None
        return value

    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


# =============================================================================
# OUTPUT: AnalysisReport (Complete Response)
# =============================================================================


class AnalysisReport(BaseModel):
    """
    Complete analysis for one ticker.
    Returned by: AnalysisService
    Consumed by: API clients

    last_close is always stamped from the newest PriceSeries sample.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "ticker": "RELIANCE.NS",
                "lastClose": "2450.50",
                "currency": "INR",
                "technicalAnalysis": {
                    "rsi": {"value": "62.50", "signal": "Neutral"},
                    "macd": {
                        "macd": "12.40",
                        "signal": "9.80",
                        "histogram": "2.60",
                        "analysis": "Bullish Momentum",
                        "history": [],
                    },
                    "bollingerBands": {
                        "upper": "2510.00",
                        "middle": "2440.00",
                        "lower": "2370.00",
                        "signal": "In Bands",
                    },
                    "ema5": "2448.00",
                    "ema9": "2445.10",
                    "sma50": "2398.75",
                },
                "fundamentalAnalysis": None,
            }
        },
    )

    ticker: str
    last_close: TwoDecimal = Field(..., ge=0, alias="lastClose")
    currency: str = Field(..., min_length=3, max_length=3)
    technical_analysis: TechnicalAnalysis = Field(..., alias="technicalAnalysis")
    fundamental_analysis: Optional[FundamentalAnalysis] = Field(
        default=None, alias="fundamentalAnalysis"
    )

    def to_response(self) -> dict[str, Any]:
        """JSON-ready dict in the public camelCase shape."""
        return self.model_dump(by_alias=True, mode="json")
