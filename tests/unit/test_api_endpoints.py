"""Tests for the HTTP endpoints."""

import base64
import json

import pytest
from fastapi.testclient import TestClient

from grail_scanner.api.dependencies import get_orchestrator, get_settings_dependency
from grail_scanner.app import app
from grail_scanner.config.settings import Settings
from grail_scanner.infrastructure.llm.session import ModelTurn
from grail_scanner.orchestrator.authenticator import AuthenticationOrchestrator
from tests.helpers import HIGH_CONFIDENCE_REPORT, JPEG_BYTES, FakeChatSession, tool_turn


@pytest.fixture
def api_settings():
    return Settings(gemini_api_key="test-key", max_image_bytes=1024, _env_file=None)


@pytest.fixture
def session():
    return FakeChatSession(
        [tool_turn(("rn_lookup", {"rn_number": "RN 73277"})), ModelTurn(text=HIGH_CONFIDENCE_REPORT)]
    )


@pytest.fixture
def client(api_settings, session):
    app.dependency_overrides[get_settings_dependency] = lambda: api_settings
    app.dependency_overrides[get_orchestrator] = lambda: AuthenticationOrchestrator(
        api_settings, session_factory=lambda config: session
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def _upload(data: bytes = JPEG_BYTES):
    return {"image": ("label.jpg", data, "image/jpeg")}


# ==========================================
#  HEALTH, STATUS & TOOLS
# ==========================================


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": "0.1.0"}


def test_status(client):
    body = client.get("/api/status").json()
    assert body["configured"] is True
    assert body["model"] == "gemini-3-pro-preview"
    assert body["thinking_level"] == "high"
    assert body["tools"] == ["rn_lookup", "brand_patterns", "date_forensics", "market_search"]


def test_status_unconfigured(client):
    app.dependency_overrides[get_settings_dependency] = lambda: Settings(
        gemini_api_key="", _env_file=None
    )
    assert client.get("/api/status").json()["configured"] is False


def test_list_tools(client):
    response = client.get("/api/tools")
    assert response.status_code == 200
    tools = response.json()
    assert [t["name"] for t in tools] == ["rn_lookup", "brand_patterns", "date_forensics", "market_search"]
    assert tools[0]["required"] == ["rn_number"]


def test_run_tool(client):
    response = client.post("/api/tools/rn_lookup", json={"rn_number": "RN 42850"})
    assert response.status_code == 200
    body = response.json()
    assert body["kind"] == "rn_lookup"
    assert body["company_name"] == "Nike Inc."


def test_run_tool_coerces_arguments(client):
    response = client.post("/api/tools/rn_lookup", json={"rn_number": 73277})
    assert response.json()["registration_year"] == 1982


def test_run_unknown_tool_returns_404(client):
    response = client.post("/api/tools/delete_everything", json={})
    assert response.status_code == 404
    assert response.json()["detail"] == "Unknown tool: delete_everything"


# ==========================================
#  AUTHENTICATE
# ==========================================


def test_authenticate(client, session):
    response = client.post("/api/authenticate", files=_upload())

    assert response.status_code == 200
    body = response.json()
    assert body["confidence"] == 88
    assert body["confidence_level"] == "high"
    assert body["is_authentic"] is True
    assert body["rn_lookup"]["company_name"] == "Levi Strauss & Co."
    assert body["tool_results"][0]["kind"] == "rn_lookup"
    assert session.images[0][1].mime_type == "image/jpeg"


def test_authenticate_base64_image(client, session):
    encoded = "data:image/png;base64," + base64.b64encode(b"\x89PNG\r\n\x1a\n0000").decode()
    response = client.post("/api/authenticate", data={"image_base64": encoded})

    assert response.status_code == 200
    assert session.images[0][1].mime_type == "image/png"


def test_authenticate_missing_api_key_returns_503(client):
    app.dependency_overrides[get_orchestrator] = lambda: AuthenticationOrchestrator(
        Settings(gemini_api_key="", _env_file=None), session_factory=lambda config: None
    )
    response = client.post("/api/authenticate", files=_upload())
    assert response.status_code == 503
    assert "GEMINI_API_KEY" in response.json()["detail"]


def test_authenticate_invalid_override_returns_422(client, session):
    response = client.post(
        "/api/authenticate", files=_upload(), data={"thinking_level": "medium"}
    )
    assert response.status_code == 422
    assert session.images == []


def test_authenticate_out_of_range_threshold_returns_422(client):
    response = client.post(
        "/api/authenticate", files=_upload(), data={"self_correction_threshold": "1.5"}
    )
    assert response.status_code == 422


def test_authenticate_stream_invalid_override_returns_422(client):
    response = client.post(
        "/api/authenticate/stream", files=_upload(), data={"media_resolution": "ultra"}
    )
    assert response.status_code == 422


def test_authenticate_empty_image_returns_400(client):
    response = client.post("/api/authenticate", files=_upload(b""))
    assert response.status_code == 400


def test_authenticate_without_image_returns_400(client):
    response = client.post("/api/authenticate", data={"model": "gemini-custom"})
    assert response.status_code == 400


def test_authenticate_oversized_image_returns_413(client):
    response = client.post("/api/authenticate", files=_upload(JPEG_BYTES * 100))
    assert response.status_code == 413


def test_authenticate_upstream_failure_returns_500(client):
    failing = FakeChatSession([tool_turn(("delete_everything", {}))])
    app.dependency_overrides[get_orchestrator] = lambda: AuthenticationOrchestrator(
        Settings(gemini_api_key="test-key", _env_file=None), session_factory=lambda config: failing
    )
    response = client.post("/api/authenticate", files=_upload())
    assert response.status_code == 500


# ==========================================
#  STREAMING
# ==========================================


def _sse_events(response) -> list[dict]:
    return [
        json.loads(line[len("data: "):])
        for line in response.text.splitlines()
        if line.startswith("data: ")
    ]


def test_authenticate_stream(client):
    response = client.post("/api/authenticate/stream", files=_upload())

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    events = _sse_events(response)
    assert [e["event"] for e in events] == ["progress"] * 6 + ["result"]
    assert events[0]["step"] == 1
    assert events[-2]["status"] == "complete"
    assert events[-1]["confidence"] == 88


def test_authenticate_stream_reports_error_event(client):
    failing = FakeChatSession([tool_turn(("delete_everything", {}))])
    app.dependency_overrides[get_orchestrator] = lambda: AuthenticationOrchestrator(
        Settings(gemini_api_key="test-key", _env_file=None), session_factory=lambda config: failing
    )

    events = _sse_events(client.post("/api/authenticate/stream", files=_upload()))

    assert events[-1] == {"event": "error", "error": "An error occurred"}
    assert all(e["event"] == "progress" for e in events[:-1])


def test_authenticate_stream_missing_api_key_returns_503(client):
    app.dependency_overrides[get_orchestrator] = lambda: AuthenticationOrchestrator(
        Settings(gemini_api_key="", _env_file=None), session_factory=lambda config: None
    )
    response = client.post("/api/authenticate/stream", files=_upload())
    assert response.status_code == 503
