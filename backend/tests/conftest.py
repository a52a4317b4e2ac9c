from datetime import date, timedelta
from typing import Optional

import numpy as np
import pytest

from pricelens.schemas.analysis import FundamentalAnalysis
from pricelens.schemas.market import ProviderName, SymbolRequest
from pricelens.services.base import ServiceError
from pricelens.services.indicators import IndicatorService
from pricelens.services.market_data.interface import PriceDataProvider
from pricelens.services.market_data.series import PriceSeries
from pricelens.services.market_data.symbols import SymbolNormalizer


def make_series(closes, start: date = date(2024, 1, 1)) -> PriceSeries:
    """Daily series, oldest first, one close per consecutive day."""
    return PriceSeries.from_samples(
        (start + timedelta(days=i), close) for i, close in enumerate(closes)
    )


class FakeProvider(PriceDataProvider):
    """In-memory provider recording the requests it receives."""

    def __init__(
        self,
        series: Optional[PriceSeries] = None,
        fundamentals: Optional[FundamentalAnalysis] = None,
        history_error: Optional[ServiceError] = None,
        fundamentals_error: Optional[ServiceError] = None,
    ):
        self.series = series
        self.fundamentals = fundamentals
        self.history_error = history_error
        self.fundamentals_error = fundamentals_error
        self.history_requests: list[SymbolRequest] = []
        self.fundamentals_requests: list[SymbolRequest] = []
        self.closed = False

    @property
    def name(self) -> ProviderName:
        return ProviderName.YAHOO

    async def fetch_price_history(self, request: SymbolRequest) -> PriceSeries:
        self.history_requests.append(request)
        if self.history_error:
            raise self.history_error
        return self.series

    async def fetch_fundamentals(self, request: SymbolRequest) -> Optional[FundamentalAnalysis]:
        self.fundamentals_requests.append(request)
        if self.fundamentals_error:
            raise self.fundamentals_error
        return self.fundamentals

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def indicator_service():
    return IndicatorService()


@pytest.fixture
def normalizer():
    return SymbolNormalizer(default_market_suffix=".NS")


@pytest.fixture
def ascending_closes():
    """25 closes 100.00, 100.50, ... 112.00."""
    return [100.0 + 0.5 * i for i in range(25)]


@pytest.fixture
def flat_series():
    return make_series([50.0] * 30)


@pytest.fixture
def wavy_series():
    """120 closes oscillating around an uptrend."""
    x = np.arange(120)
    return make_series(100 + 0.3 * x + 5 * np.sin(x / 4))
