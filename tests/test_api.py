"""Integration tests for the VaR API endpoints."""

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from var_service.api.app import create_app
from var_service.data.returns import ReturnSeriesProvider
from var_service.errors import ConfigurationError, ProviderError, UpstreamError


def _client(settings=None, providers=None, clock=None):
    settings = settings or Settings()
    return_provider = ReturnSeriesProvider(providers, clock=clock) if providers else None
    return TestClient(create_app(settings, return_provider=return_provider))


def test_compute_var_historical():
    client = _client()

    response = client.post(
        "/api/compute_var",
        json={"method": "historical", "returns": [-0.05, -0.02, 0.01, 0.03, 0.04], "confidence": 0.8},
    )

    assert response.status_code == 200
    assert response.json()["var"] == pytest.approx(0.02)


def test_compute_var_parametric_and_montecarlo():
    settings = Settings()
    settings.var.monte_carlo_seed = 7
    client = _client(settings)
    body = {"returns": [0.01, -0.01] * 50, "confidence": 0.95}

    parametric = client.post("/api/compute_var", json={"method": "parametric", **body})
    first = client.post("/api/compute_var", json={"method": "montecarlo", **body})
    second = client.post("/api/compute_var", json={"method": "montecarlo", **body})

    assert parametric.status_code == 200
    assert parametric.json()["var"] == pytest.approx(0.016448536, rel=1e-6)
    assert first.json()["var"] == second.json()["var"]


def test_compute_var_unknown_method_is_bad_request():
    response = _client().post(
        "/api/compute_var",
        json={"method": "bogus", "returns": [0.01], "confidence": 0.95},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidMethod"


@pytest.mark.parametrize(
    "body",
    [
        {"method": "historical", "returns": [], "confidence": 0.95},
        {"method": "parametric", "returns": [0.01], "confidence": 1.5},
        {"method": "montecarlo", "returns": [0.01], "confidence": 0.0},
    ],
)
def test_compute_var_invalid_parameters_are_bad_request(body):
    response = _client().post("/api/compute_var", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidParameter"


def test_fetch_returns_shape(fake_provider, prices, fixed_clock):
    primary = fake_provider("yahoo", prices([100.0, 105.0, 103.0]))
    client = _client(providers=[primary], clock=fixed_clock)

    response = client.post("/api/fetch_returns", json={"ticker": "aapl"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["ticker"] == "AAPL"
    assert payload["source"] == "yahoo"
    assert payload["returns"] == pytest.approx([0.05, -0.0190476190476])
    assert payload["preview"] == [
        {"date": "2024-01-03", "return": pytest.approx(0.05)},
        {"date": "2024-01-04", "return": pytest.approx(-0.0190476190476)},
    ]


def test_fetch_returns_falls_back(fake_provider, prices, fixed_clock):
    primary = fake_provider("yahoo", error=ProviderError("Yahoo request failed (503)"))
    secondary = fake_provider("alpha_vantage", prices([10.0, 11.0]))
    client = _client(providers=[primary, secondary], clock=fixed_clock)

    response = client.post("/api/fetch_returns", json={"ticker": "IBM"})

    assert response.status_code == 200
    assert response.json()["source"] == "alpha_vantage"


def test_fetch_returns_all_sources_failed_is_bad_gateway(fake_provider, fixed_clock):
    primary = fake_provider("yahoo", error=ProviderError("down"))
    secondary = fake_provider("alpha_vantage", error=UpstreamError("rate limit"))
    client = _client(providers=[primary, secondary], clock=fixed_clock)

    response = client.post("/api/fetch_returns", json={"ticker": "IBM"})

    assert response.status_code == 502
    assert response.json()["error"] == "UpstreamError"


def test_fetch_returns_missing_credential_is_server_error(fake_provider, fixed_clock):
    primary = fake_provider("yahoo", error=ProviderError("down"))
    secondary = fake_provider("alpha_vantage", error=ConfigurationError("ALPHA_VANTAGE_API_KEY is required"))
    client = _client(providers=[primary, secondary], clock=fixed_clock)

    response = client.post("/api/fetch_returns", json={"ticker": "IBM"})

    assert response.status_code == 500
    assert response.json()["error"] == "ConfigurationError"


def test_methods_and_health():
    client = _client()

    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/api/methods").json() == {"methods": ["historical", "parametric", "montecarlo"]}


def test_cors_allows_browser_origin():
    response = _client().get("/health", headers={"Origin": "http://localhost:5173"})

    assert response.headers["access-control-allow-origin"] == "*"
