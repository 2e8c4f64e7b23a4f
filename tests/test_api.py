"""Integration tests for the summarize and send-email endpoints.

Uses FastAPI TestClient against a test app whose app.state holds a real
SummaryGenerator (with litellm mocked) and an EmailDispatcher over the
FakeTransport double.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.recap.emails.dispatcher import EmailDispatcher
from src.recap.main import create_app
from src.recap.summaries.generator import SummaryGenerator
from tests.fakes import FakeTransport, create_test_app, make_completion

ACOMPLETION = "src.recap.summaries.generator.litellm.acompletion"


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport) -> TestClient:
    app = create_test_app(
        summary_generator=SummaryGenerator(api_key="test-key", model="gemini/gemini-2.0-flash"),
        email_dispatcher=EmailDispatcher(transport),
    )
    return TestClient(app)


# ── Summarize ────────────────────────────────────────────────────────────────


class TestSummarizeEndpoint:
    def test_end_to_end_default_instruction(self, client):
        mock_call = AsyncMock(return_value=make_completion("Title: Friday launch"))
        with patch(ACOMPLETION, new=mock_call):
            response = client.post(
                "/api/summarize",
                json={"transcriptText": "Alice: let's ship by Friday.", "customPrompt": ""},
            )

        assert response.status_code == 200
        assert response.json() == {"summary": "Title: Friday launch"}
        prompt = mock_call.call_args.kwargs["messages"][0]["content"]
        assert "Provide a structured summary" in prompt

    def test_empty_provider_output_returns_sentinel(self, client):
        with patch(ACOMPLETION, new=AsyncMock(return_value=make_completion(""))):
            response = client.post(
                "/api/summarize",
                json={"transcriptText": "um", "customPrompt": ""},
            )
        assert response.status_code == 200
        assert response.json() == {"summary": "No substantial content found."}

    def test_blank_transcript_rejected_without_provider_call(self, client):
        mock_call = AsyncMock()
        with patch(ACOMPLETION, new=mock_call):
            response = client.post(
                "/api/summarize",
                json={"transcriptText": "   ", "customPrompt": ""},
            )
        assert response.status_code == 400
        assert response.json() == {"error": "Transcript text is required"}
        mock_call.assert_not_called()

    def test_schema_failure_has_details(self, client):
        response = client.post(
            "/api/summarize",
            json={"transcriptText": "x" * 200_001, "customPrompt": ""},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Invalid input"
        assert data["details"][0]["path"] == ["transcriptText"]

    def test_malformed_json_is_validation_failure(self, client):
        response = client.post(
            "/api/summarize",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"

    def test_invalid_key_does_not_leak_payload(self, client):
        boom = Exception("API key not valid. key=AIza-secret")
        with patch(ACOMPLETION, new=AsyncMock(side_effect=boom)):
            response = client.post(
                "/api/summarize",
                json={"transcriptText": "Alice: hi", "customPrompt": ""},
            )
        assert response.status_code == 400
        assert "AIza-secret" not in response.text
        assert "GOOGLE_API_KEY" in response.json()["error"]

    def test_server_fault_maps_to_service_unavailable(self, client):
        boom = Exception("500 Internal error encountered")
        boom.status_code = 500
        with patch(ACOMPLETION, new=AsyncMock(side_effect=boom)):
            response = client.post(
                "/api/summarize",
                json={"transcriptText": "Alice: hi", "customPrompt": ""},
            )
        assert response.status_code == 503

    def test_content_filtered_response_is_rejected(self, client):
        blocked = make_completion(None, finish_reason="content_filter")
        with patch(ACOMPLETION, new=AsyncMock(return_value=blocked)):
            response = client.post(
                "/api/summarize",
                json={"transcriptText": "Alice: something the filter blocks", "customPrompt": ""},
            )
        assert response.status_code == 400
        assert response.json() == {
            "error": "Content blocked by safety filters. Please rephrase or remove sensitive content."
        }

    def test_unknown_provider_error_is_500(self, client):
        with patch(ACOMPLETION, new=AsyncMock(side_effect=Exception("weird"))):
            response = client.post(
                "/api/summarize",
                json={"transcriptText": "Alice: hi", "customPrompt": ""},
            )
        assert response.status_code == 500
        assert response.json() == {"error": "AI summarization failed: weird"}

    def test_provider_not_configured(self):
        app = create_test_app(
            summary_generator=SummaryGenerator(api_key="", model="gemini/gemini-2.0-flash"),
            email_dispatcher=EmailDispatcher(None),
        )
        response = TestClient(app).post(
            "/api/summarize",
            json={"transcriptText": "Alice: hi", "customPrompt": ""},
        )
        assert response.status_code == 500
        assert "not configured" in response.json()["error"]

    def test_unexpected_error_is_redacted(self):
        generator = MagicMock()
        generator.summarize = AsyncMock(side_effect=KeyError("internal detail"))
        app = create_test_app(summary_generator=generator)

        response = TestClient(app).post(
            "/api/summarize",
            json={"transcriptText": "Alice: hi", "customPrompt": ""},
        )
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_preflight(self, client):
        response = client.options("/api/summarize")
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type"


# ── Send email ───────────────────────────────────────────────────────────────


class TestSendEmailEndpoint:
    def test_end_to_end_comma_string(self, client, transport):
        response = client.post(
            "/api/send-email",
            json={"to": "a@x.com, , b@x.com", "subject": "", "body": "Hi"},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Email sent successfully", "ok": True}
        assert transport.calls == [
            {"to": ["a@x.com", "b@x.com"], "subject": "Meeting Summary", "body": "Hi"}
        ]

    def test_two_of_five_failed_is_success(self):
        to = ["a@x.com", "b@x.com", "c@x.com", "d@x.com", "e@x.com"]
        transport = FakeTransport(fail=["d@x.com", "b@x.com"])
        app = create_test_app(email_dispatcher=EmailDispatcher(transport))

        response = TestClient(app).post(
            "/api/send-email",
            json={"to": to, "subject": "Sync", "body": "Notes"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["message"].index("b@x.com") < data["message"].index("d@x.com")
        assert data["message"] == (
            "Email sent successfully. Failed to send to: b@x.com, d@x.com"
        )

    @pytest.mark.parametrize("count", [1, 20])
    def test_auth_failure_is_failure_regardless_of_count(self, count):
        transport = FakeTransport(systemic_error="Email service rejected the sender credentials.")
        app = create_test_app(email_dispatcher=EmailDispatcher(transport))

        response = TestClient(app).post(
            "/api/send-email",
            json={"to": [f"u{i}@example.com" for i in range(count)], "body": "Notes"},
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": "Email service rejected the sender credentials.",
            "ok": False,
        }

    def test_not_configured_transport(self):
        app = create_test_app(email_dispatcher=EmailDispatcher(None))
        response = TestClient(app).post(
            "/api/send-email",
            json={"to": "a@x.com", "body": "Notes"},
        )
        assert response.status_code == 500
        assert response.json()["ok"] is False

    def test_invalid_address_rejected(self, client, transport):
        response = client.post(
            "/api/send-email",
            json={"to": "a@x.com, nope", "body": "Notes"},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Invalid input"
        assert data["ok"] is False
        assert data["details"][0]["path"] == ["to", 1]
        assert transport.calls == []

    def test_blank_body_rejected(self, client, transport):
        response = client.post("/api/send-email", json={"to": "a@x.com", "body": "  "})
        assert response.status_code == 400
        assert response.json() == {"error": "Email body is required", "ok": False}
        assert transport.calls == []

    def test_preflight(self, client):
        response = client.options("/api/send-email")
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"


# ── Application ──────────────────────────────────────────────────────────────


class TestApplication:
    def test_lifespan_builds_services_and_health(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "")
        monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_FILE", "")
        monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_JSON_B64", "")

        app = create_app()
        with TestClient(app) as client:
            assert isinstance(app.state.summary_generator, SummaryGenerator)
            assert isinstance(app.state.email_dispatcher, EmailDispatcher)

            health = client.get("/health")
            assert health.status_code == 200
            assert health.json()["status"] == "ok"
            assert "x-request-id" in health.headers

            ready = client.get("/health/ready")
            assert ready.status_code == 503
            assert ready.json()["checks"] == {"summarizer": "no_keys", "email": "not_configured"}

    def test_readiness_ok_when_configured(self, transport):
        app = create_test_app(
            summary_generator=SummaryGenerator(api_key="k", model="gemini/gemini-2.0-flash"),
            email_dispatcher=EmailDispatcher(transport),
        )
        response = TestClient(app).get("/health/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    @pytest.mark.parametrize("path", ["/api/summarize", "/api/send-email"])
    def test_browser_preflight_answered_by_route(self, path):
        client = TestClient(create_app())
        response = client.options(
            path,
            headers={
                "Origin": "https://recap.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type"
        assert "access-control-max-age" not in response.headers

    def test_cross_origin_request_gets_allow_origin(self):
        client = TestClient(create_app())
        response = client.get("/health", headers={"Origin": "https://recap.example.com"})
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_metrics_endpoint(self):
        with TestClient(create_app()) as client:
            client.get("/health")
            response = client.get("/metrics")
        assert response.status_code == 200
        assert "http_requests_total" in response.text
