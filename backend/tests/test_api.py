"""
HTTP tests for the analysis endpoint with the service dependency overridden.
"""

import pytest
from fastapi.testclient import TestClient

from pricelens import main
from pricelens.core.config import settings
from pricelens.main import app
from pricelens.services.analysis import service as analysis_service_module
from pricelens.services.analysis import AnalysisService, get_analysis_service
from pricelens.services.base import (
    InsufficientDataError,
    NoDataError,
    RateLimitError,
    UpstreamUnavailableError,
)
from tests.conftest import FakeProvider

URL = "/api/v1/analysis"


@pytest.fixture
def provider(wavy_series):
    return FakeProvider(wavy_series)


@pytest.fixture
def client(provider, normalizer, indicator_service):
    service = AnalysisService(provider, normalizer, indicator_service)
    app.dependency_overrides[get_analysis_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestAnalysisEndpoint:
    def test_stock_report(self, client):
        response = client.get(URL, params={"ticker": "RELIANCE", "assetClass": "stock"})

        assert response.status_code == 200
        body = response.json()
        assert body["ticker"] == "RELIANCE.NS"
        assert body["currency"] == "INR"
        assert isinstance(body["lastClose"], str)
        assert body["technicalAnalysis"]["rsi"]["signal"] in {
            "Oversold",
            "Neutral",
            "Overbought",
            "Extremely Overbought",
        }
        assert "ema9" in body["technicalAnalysis"]

    def test_type_alias_for_asset_class(self, client):
        response = client.get(URL, params={"ticker": "ETH", "type": "crypto"})

        assert response.status_code == 200
        assert response.json()["ticker"] == "ETH-USD"
        assert response.json()["fundamentalAnalysis"] is None

    @pytest.mark.parametrize(
        "params",
        [
            {"assetClass": "stock"},
            {"ticker": "AAPL"},
            {"ticker": "  ", "assetClass": "stock"},
        ],
    )
    def test_missing_parameters(self, client, params):
        response = client.get(URL, params=params)

        assert response.status_code == 400
        assert "error" in response.json()

    def test_invalid_asset_class(self, client):
        response = client.get(URL, params={"ticker": "AAPL", "assetClass": "bond"})

        assert response.status_code == 400
        assert "bond" in response.json()["error"]


class TestErrorMapping:
    @pytest.mark.parametrize(
        "error, status_code",
        [
            (NoDataError("Fake", "No data for ZZZ.NS"), 404),
            (InsufficientDataError("Fake", "No usable price samples"), 404),
            (RateLimitError("Fake", "Too many requests"), 429),
            (UpstreamUnavailableError("Fake", "Connection reset"), 502),
        ],
    )
    def test_service_errors(self, client, provider, error, status_code):
        provider.history_error = error

        response = client.get(URL, params={"ticker": "ZZZ", "assetClass": "stock"})

        assert response.status_code == status_code
        assert response.json() == {"error": error.message}

    def test_unexpected_error_is_500(self, client, provider):
        provider.history_error = RuntimeError("boom")

        response = client.get(URL, params={"ticker": "ZZZ", "assetClass": "stock"})

        assert response.status_code == 500
        assert "boom" not in response.json()["error"]


def test_health_reports_provider(monkeypatch, provider, normalizer, indicator_service):
    service = AnalysisService(provider, normalizer, indicator_service)
    monkeypatch.setattr(main, "get_analysis_service", lambda: service)

    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestMisconfiguredProvider:
    @pytest.fixture(autouse=True)
    def unknown_provider(self, monkeypatch):
        monkeypatch.setattr(analysis_service_module, "_service_instance", None)
        monkeypatch.setattr(settings, "price_provider", "bloomberg")

    def test_analysis_returns_error_body(self):
        response = TestClient(app).get(URL, params={"ticker": "AAPL", "assetClass": "stock"})

        assert response.status_code == 500
        assert response.json() == {"error": "Price provider is misconfigured"}

    def test_health_is_degraded(self):
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
