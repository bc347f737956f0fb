import pytest
from fastapi.testclient import TestClient

from mhclassifier.app.main import app, create_app
from mhclassifier.core.config import Settings
from mhclassifier.app.routes_predict import resolve_service
from mhclassifier.services.classification_service import ClassificationService, get_service

from conftest import FakeClient, upstream_success


@pytest.fixture
def use_client():
    """Install a ClassificationService backed by the given fake client."""
    def _install(fake):
        service = ClassificationService(Settings(hf_api_key="test-key"), client=fake)
        app.dependency_overrides[resolve_service] = lambda: service
        return TestClient(app)

    yield _install
    app.dependency_overrides.clear()


def test_health():
    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "mental-health-classifier"}


def test_connectivity_check(use_client):
    fake = FakeClient()
    client = use_client(fake)
    r = client.post("/api/predict", json={"test": True})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "API is working"
    assert body["model"] == "B1NT4N9/roberta-mental-health-id"
    assert fake.calls == []


def test_missing_text_is_rejected(use_client):
    client = use_client(FakeClient())
    r = client.post("/api/predict", json={})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error_type": "validation_error", "message": "Text is required."}


def test_short_text_is_rejected(use_client):
    client = use_client(FakeClient())
    r = client.post("/api/predict", json={"text": "halo"})
    assert r.status_code == 400
    assert "Minimum 10" in r.json()["message"]


def test_model_predictions(use_client):
    client = use_client(FakeClient(upstream_success(("LABEL_4", 0.81), ("LABEL_0", 0.19))))
    r = client.post("/api/predict", json={"text": "Saya ingin mengakhiri semuanya"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["fallback"] is False
    assert [p["category"] for p in body["predictions"]] == ["Suicidal", "Normal"]
    assert body["predictions"][0]["confidence_tier"] == "high"
    assert body["predictions"][0]["percentage"] == 81.0


def test_fallback_predictions(use_client):
    client = use_client(FakeClient())
    r = client.post(
        "/api/predict",
        json={"text": "Saya merasa sangat bahagia dan sehat hari ini", "sensitivity": {"normal": 0.3}},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is False
    assert body["fallback"] is True
    assert body["error"] == "http_error"
    assert len(body["predictions"]) == 5
    assert body["predictions"][0]["category"] == "Normal"
    assert sum(p["probability"] for p in body["predictions"]) == pytest.approx(1.0)
    assert body["text_analysis"]["normal_indicators"] == 2


def test_heuristic_only_request(use_client):
    fake = FakeClient(upstream_success(("LABEL_0", 1.0)))
    client = use_client(fake)
    r = client.post("/api/predict", json={"text": "Saya cemas sekali hari ini", "use_model": False})
    assert r.status_code == 200
    assert r.json()["fallback"] is True
    assert fake.calls == []


def test_out_of_range_sensitivity_is_rejected(use_client):
    client = use_client(FakeClient())
    r = client.post("/api/predict", json={"text": "Saya cemas sekali hari ini", "sensitivity": {"normal": 3}})
    assert r.status_code == 422


def test_unexpected_error_returns_default_distribution(use_client):
    client = use_client(FakeClient(exc=RuntimeError("boom")))
    r = client.post("/api/predict", json={"text": "Saya cemas sekali hari ini"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is False
    assert body["fallback"] is True
    assert body["predictions"][0]["category"] == "Normal"
    assert body["predictions"][0]["probability"] == pytest.approx(0.6)


def test_cors_preflight():
    client = TestClient(app)
    r = client.options(
        "/api/predict",
        headers={"Origin": "http://example.com", "Access-Control-Request-Method": "POST"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"


def test_unknown_keyword_profile_returns_default_distribution(monkeypatch):
    monkeypatch.setenv("KEYWORD_PROFILE", "nope")
    get_service.cache_clear()
    try:
        r = TestClient(app).post("/api/predict", json={"text": "Saya cemas sekali hari ini"})
    finally:
        get_service.cache_clear()

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is False
    assert body["fallback"] is True
    assert body["error"] == "keyword profile unavailable"
    assert body["predictions"][0]["category"] == "Normal"
    assert body["predictions"][0]["probability"] == pytest.approx(0.6)


def test_create_app_uses_configured_origins():
    client = TestClient(create_app(Settings(cors_origins=("http://allowed.test",))))
    r = client.options(
        "/api/predict",
        headers={"Origin": "http://allowed.test", "Access-Control-Request-Method": "POST"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://allowed.test"

    r = client.options(
        "/api/predict",
        headers={"Origin": "http://other.test", "Access-Control-Request-Method": "POST"},
    )
    assert r.status_code == 400
