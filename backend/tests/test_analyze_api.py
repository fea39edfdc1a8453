"""Tests for the HTTP surface: /health, /analyze, /metrics and error handlers."""

import importlib
from unittest.mock import MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from prometheus_client import REGISTRY

from app.main import INTERNAL_ERROR_MESSAGE, unhandled_error_handler


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_analyze_returns_all_metrics(client: AsyncClient, sample_payload: dict):
    resp = await client.post("/analyze", json=sample_payload)
    assert resp.status_code == 200
    data = resp.json()
    assert set(data) == {"bmi", "bmr", "calorieNeeds", "sleepAnalysis", "hydrationAnalysis", "generalHealth"}
    assert data["bmi"] == {
        "value": 22.9,
        "category": "Normal",
        "recommendation": "Maintain balanced diet and exercise",
    }
    assert data["bmr"]["value"] == 1649
    assert data["bmr"]["explanation"] == "BMR is the number of calories your body burns at rest"
    assert data["calorieNeeds"]["maintenance"] == 2556
    assert data["calorieNeeds"]["weightLoss"] == 2056
    assert data["calorieNeeds"]["weightGain"] == 3056
    assert data["sleepAnalysis"]["current"] == 6
    assert data["sleepAnalysis"]["recommended"] == "7-9 hours"
    assert data["sleepAnalysis"]["status"] == "Insufficient"
    assert isinstance(data["sleepAnalysis"]["tips"], list)
    assert data["hydrationAnalysis"]["current"] == 2
    assert data["hydrationAnalysis"]["recommended"] == 2
    assert data["hydrationAnalysis"]["status"] == "Optimal"
    assert data["generalHealth"]["status"] == "Consult a professional for accurate advice"
    assert data["generalHealth"]["recommendations"] == [
        "Eat whole foods",
        "Exercise regularly",
        "Manage stress",
        "Sleep well",
        "Stay hydrated",
    ]
    assert data["generalHealth"]["reportedSymptoms"] == "No symptoms reported"


@pytest.mark.asyncio
async def test_analyze_female_very_active(client: AsyncClient, sample_payload: dict):
    sample_payload.update({"gender": "female", "activityLevel": "veryActive", "sleepHours": 10})
    resp = await client.post("/analyze", json=sample_payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["bmr"]["value"] == 1483
    # 1483 * 1.9 = 2817.7
    assert data["calorieNeeds"]["maintenance"] == 2818
    assert data["sleepAnalysis"]["status"] == "Excessive"


@pytest.mark.asyncio
async def test_analyze_missing_field_returns_400(client: AsyncClient, sample_payload: dict):
    del sample_payload["weight"]
    resp = await client.post("/analyze", json=sample_payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required health data fields"}


@pytest.mark.asyncio
async def test_analyze_zero_age_returns_400(client: AsyncClient, sample_payload: dict):
    sample_payload["age"] = 0
    resp = await client.post("/analyze", json=sample_payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid age, height, or weight values"}


@pytest.mark.asyncio
async def test_analyze_malformed_json_returns_400(client: AsyncClient):
    resp = await client.post(
        "/analyze",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_analyze_array_body_returns_400(client: AsyncClient):
    resp = await client.post("/analyze", json=[1, 2, 3])
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


@pytest.mark.asyncio
async def test_analyze_unexpected_error_returns_500(client: AsyncClient, sample_payload: dict):
    with patch("app.api.analysis.analyze_health", side_effect=RuntimeError("boom")):
        resp = await client.post("/analyze", json=sample_payload)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to analyze health data"}


@pytest.mark.asyncio
async def test_unhandled_error_handler_returns_generic_500():
    request = MagicMock()
    request.url.path = "/analyze"
    resp = await unhandled_error_handler(request, RuntimeError("boom"))
    assert resp.status_code == 500
    assert resp.body == ('{"error":"%s"}' % INTERNAL_ERROR_MESSAGE).encode()


@pytest.mark.asyncio
async def test_security_headers(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_cors_preflight_allows_browser_client(client: AsyncClient):
    resp = await client.options(
        "/analyze",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"


@pytest.mark.asyncio
async def test_metrics_count_analyses(client: AsyncClient, sample_payload: dict):
    await client.post("/analyze", json=sample_payload)
    resp = await client.get("/metrics/")
    assert resp.status_code == 200
    assert 'health_analyses_total{bmi_category="Normal"}' in resp.text
    assert "health_analysis_rejections_total" in resp.text


@pytest.mark.asyncio
async def test_analyze_height_too_small_for_bmi_returns_400(client: AsyncClient, sample_payload: dict):
    sample_payload["height"] = 1e-200
    resp = await client.post("/analyze", json=sample_payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid age, height, or weight values"}


@pytest.mark.asyncio
async def test_malformed_body_counts_as_rejection(client: AsyncClient):
    before = REGISTRY.get_sample_value("health_analysis_rejections_total")
    resp = await client.post(
        "/analyze",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert REGISTRY.get_sample_value("health_analysis_rejections_total") == before + 1


@pytest.mark.asyncio
async def test_hsts_header_when_enabled(client: AsyncClient):
    with patch("app.main.settings.enable_hsts", True):
        resp = await client.get("/health")
    assert resp.headers["Strict-Transport-Security"] == "max-age=31536000; includeSubDomains"


@pytest.mark.asyncio
async def test_no_hsts_header_by_default(client: AsyncClient):
    resp = await client.get("/health")
    assert "Strict-Transport-Security" not in resp.headers


@pytest_asyncio.fixture
async def prefixed_client(monkeypatch):
    """Client for an app rebuilt with API_PREFIX=/api, the browser client's paths."""
    import app.config
    import app.main

    monkeypatch.setenv("API_PREFIX", "/api")
    importlib.reload(app.config)
    importlib.reload(app.main)
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app.main.app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        monkeypatch.setenv("API_PREFIX", "")
        importlib.reload(app.config)
        importlib.reload(app.main)


@pytest.mark.asyncio
async def test_api_prefix_serves_browser_client_paths(prefixed_client: AsyncClient, sample_payload: dict):
    health = await prefixed_client.get("/api/health")
    assert health.status_code == 200
    assert health.json() == {"status": "healthy"}
    resp = await prefixed_client.post("/api/analyze", json=sample_payload)
    assert resp.status_code == 200
    assert resp.json()["bmi"]["value"] == 22.9
    missing = await prefixed_client.post("/analyze", json=sample_payload)
    assert missing.status_code == 404
