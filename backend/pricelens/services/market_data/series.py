"""
Price Series

Immutable, de-duplicated closing-price series for one symbol.

Canonical order is OLDEST-FIRST. Every provider payload goes through
from_time_series / from_samples, which sort by date, so no caller ever
has to know which order the upstream used. The newest-first view is the
reversed array, never a separate copy.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Union

import numpy as np

from pricelens.services.base import InsufficientDataError

logger = logging.getLogger(__name__)

DateKey = Union[date, datetime, str]


def _parse_date(key: DateKey) -> Optional[date]:
    """Accept date, datetime, pandas Timestamp or 'YYYY-MM-DD[ HH:MM:SS]'."""
    if isinstance(key, datetime):
        return key.date()
    if isinstance(key, date):
        return key
    if hasattr(key, "to_pydatetime"):
        return key.to_pydatetime().date()
    try:
        return date.fromisoformat(str(key).strip()[:10])
    except ValueError:
        return None


def _parse_close(raw: Any) -> Optional[float]:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


@dataclass(frozen=True)
class PriceSeries:
    """Closing prices ordered ascending by date (oldest first)."""

    dates: tuple[date, ...]
    closes: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "closes", np.array(self.closes, dtype=float))
        if len(self.dates) == 0:
            raise InsufficientDataError("PriceSeries", "Price series has no samples")
        if len(self.dates) != len(self.closes):
            raise ValueError("dates and closes must have the same length")
        if not np.all(np.isfinite(self.closes)) or np.any(self.closes < 0):
            raise ValueError("closes must be finite and non-negative")
        if any(a >= b for a, b in zip(self.dates, self.dates[1:])):
            raise ValueError("dates must be strictly ascending")
        self.closes.flags.writeable = False

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_samples(cls, samples: Iterable[tuple[DateKey, Any]]) -> "PriceSeries":
        """
        Build from (date, close) pairs in any order.

        Unparseable dates and non-finite or negative closes are dropped.
        The first sample seen for a date wins.
        """
        by_date: dict[date, float] = {}
        dropped = 0

        for raw_date, raw_close in samples:
            day = _parse_date(raw_date)
            close = _parse_close(raw_close)
            if day is None or close is None:
                dropped += 1
                continue
            if day in by_date:
                dropped += 1
                continue
            by_date[day] = close

        if dropped:
            logger.debug(f"Dropped {dropped} unusable price samples")

        if not by_date:
            raise InsufficientDataError(
                "PriceSeries", "No usable price samples", {"dropped": dropped}
            )

        ordered = sorted(by_date.items())
        return cls(
            dates=tuple(d for d, _ in ordered),
            closes=np.array([c for _, c in ordered], dtype=float),
        )

    @classmethod
    def from_time_series(
        cls,
        time_series: Mapping[DateKey, Mapping[str, Any]],
        close_field: Union[str, tuple[str, ...]],
    ) -> "PriceSeries":
        """
        Build from a provider's date -> fields mapping.

        close_field names the sub-field holding the closing price. A tuple
        is tried in order, for providers whose field name varies.
        """
        fields = (close_field,) if isinstance(close_field, str) else close_field

        def _close(entry: Mapping[str, Any]) -> Any:
            for field in fields:
                if field in entry:
                    return entry[field]
            return None

        return cls.from_samples(
            (key, _close(entry) if isinstance(entry, Mapping) else None)
            for key, entry in time_series.items()
        )

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.dates)

    @property
    def oldest_first(self) -> np.ndarray:
        return self.closes

    @property
    def newest_first(self) -> np.ndarray:
        return self.closes[::-1]

    @property
    def last_close(self) -> float:
        return float(self.closes[-1])

    @property
    def last_date(self) -> date:
        return self.dates[-1]

    def tail(self, n: int) -> list[tuple[date, float]]:
        """Most recent n samples, oldest first."""
        if n <= 0:
            return []
        return [(d, float(c)) for d, c in zip(self.dates[-n:], self.closes[-n:])]
