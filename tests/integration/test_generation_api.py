"""
Integration tests for the generation HTTP API.

Tests the FastAPI application end to end over fake provider adapters:
buffered and streamed generation, error status mapping, provider
discovery and health reporting.
"""
import json

import pytest
from fastapi.testclient import TestClient

from ai_gateway.api.app import create_app
from ai_gateway.core.errors import UpstreamError
from ai_gateway.models.catalog import ProviderId
from ai_gateway.models.response import GenerationResponse, Usage

from conftest import FakeProvider, make_gateway


def say_hi(provider="openai", model="gpt-4o", **extra):
    payload = {
        "provider": provider,
        "model": model,
        "messages": [{"role": "user", "content": "Say hi"}],
    }
    payload.update(extra)
    return payload


def sse_payloads(text):
    return [
        frame[len("data: "):]
        for frame in text.split("\n\n")
        if frame.startswith("data: ")
    ]


@pytest.fixture
def fakes():
    """OpenAI and Google configured, the rest missing."""
    configured = (ProviderId.OPENAI, ProviderId.GOOGLE)
    return {
        provider: FakeProvider(
            provider,
            configured=provider in configured,
            chunks=["Hel", "lo"],
        )
        for provider in ProviderId
    }


@pytest.fixture
def client(fakes):
    with TestClient(create_app(gateway=make_gateway(fakes))) as test_client:
        yield test_client


class TestGenerateEndpoint:
    """Test POST /api/ai/generate."""

    def test_generate(self, client, fakes):
        """Test a buffered generation."""
        fakes[ProviderId.OPENAI]._response = GenerationResponse(
            content="Hi!",
            model_id="gpt-4o",
            provider_id="openai",
            usage=Usage(input_tokens=5, output_tokens=3, total_tokens=8),
        )

        response = client.post("/api/ai/generate", json=say_hi(temperature=0.7, maxTokens=50))

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {
                "content": "Hi!",
                "modelId": "gpt-4o",
                "providerId": "openai",
                "usage": {"inputTokens": 5, "outputTokens": 3, "totalTokens": 8},
            },
        }
        sent = fakes[ProviderId.OPENAI].calls[0]
        assert sent.temperature == 0.7
        assert sent.max_tokens == 50

    def test_unknown_provider(self, client):
        """Test unknown providers are a client error."""
        response = client.post("/api/ai/generate", json=say_hi("mistral", "mistral-large"))

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["detail"]["kind"] == "unknown_provider"

    def test_unknown_model(self, client):
        """Test unknown models are a client error listing valid models."""
        response = client.post("/api/ai/generate", json=say_hi("google", "gpt-4o"))

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["kind"] == "unknown_model"
        assert [m["id"] for m in detail["availableModels"]] == [
            "gemini-1.5-pro", "gemini-1.5-flash", "gemini-pro",
        ]
        assert detail["availableModels"][0]["displayName"] == "Gemini 1.5 Pro"

    def test_unconfigured_provider(self, client, fakes):
        """Test a provider without a key is a server error."""
        response = client.post(
            "/api/ai/generate",
            json=say_hi("anthropic", "claude-3-5-sonnet-20241022"),
        )

        assert response.status_code == 500
        assert response.json()["detail"]["kind"] == "provider_not_configured"
        assert fakes[ProviderId.ANTHROPIC].calls == []

    def test_upstream_error(self, client, fakes):
        """Test vendor failures are a server error carrying the vendor status."""
        fakes[ProviderId.OPENAI]._error = UpstreamError(
            "rate limited", provider="openai", status_code=429,
        )

        response = client.post("/api/ai/generate", json=say_hi())

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "OpenAI API error: rate limited (429)"
        assert body["detail"]["vendorMessage"] == "rate limited"
        assert body["detail"]["statusCode"] == 429
        assert body["detail"]["retryable"] is True

    @pytest.mark.parametrize("payload", [
        {"provider": "openai", "model": "gpt-4o"},
        say_hi(messages=[]),
        say_hi(temperature=3),
        say_hi(messages=[{"role": "robot", "content": "x"}]),
    ])
    def test_invalid_body(self, client, payload):
        """Test malformed bodies are rejected with a client error."""
        response = client.post("/api/ai/generate", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Invalid request format"
        assert body["details"]

    def test_no_provider_configured(self):
        """Test a deployment with no keys rejects every generation."""
        gateway = make_gateway({
            provider: FakeProvider(provider, configured=False) for provider in ProviderId
        })
        with TestClient(create_app(gateway=gateway)) as client:
            response = client.post("/api/ai/generate", json=say_hi())

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["kind"] == "misconfigured_deployment"
        assert len(detail["details"]) == 5


class TestStreamingEndpoint:
    """Test streamed generation over server-sent events."""

    def test_stream(self, client):
        """Test chunks arrive as SSE frames followed by [DONE]."""
        response = client.post("/api/ai/generate", json=say_hi(stream=True))

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"
        payloads = sse_payloads(response.text)
        assert [json.loads(p) for p in payloads[:-1]] == [{"content": "Hel"}, {"content": "lo"}]
        assert payloads[-1] == "[DONE]"

    def test_stream_failure_event(self, client, fakes):
        """Test a mid-stream failure ends with an error frame instead of [DONE]."""
        fakes[ProviderId.GOOGLE]._stream_error = UpstreamError("quota exceeded", provider="google")

        response = client.post("/api/ai/generate", json=say_hi("google", "gemini-pro", stream=True))

        payloads = sse_payloads(response.text)
        assert json.loads(payloads[-1]) == {"error": "Google AI API error: quota exceeded"}
        assert "[DONE]" not in payloads

    def test_stream_validation_error(self, client, fakes):
        """Test stream validation failures are plain JSON errors."""
        response = client.post("/api/ai/generate", json=say_hi("openai", "gpt-5", stream=True))

        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "unknown_model"
        assert fakes[ProviderId.OPENAI].stream_calls == []

    def test_streaming_unsupported(self, fakes):
        """Test streaming from a provider that cannot stream is a client error."""
        fakes[ProviderId.OPENAI] = FakeProvider(ProviderId.OPENAI, streaming=False)
        with TestClient(create_app(gateway=make_gateway(fakes))) as client:
            response = client.post("/api/ai/generate", json=say_hi(stream=True))

        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "streaming_unsupported"


class TestDiscoveryEndpoints:
    """Test provider listing and health."""

    def test_list_providers(self, client):
        """Test every provider is listed with readiness and catalog."""
        response = client.get("/api/ai/providers")

        assert response.status_code == 200
        data = response.json()["data"]
        providers = data["providers"]
        assert [p["providerId"] for p in providers] == [
            "openai", "anthropic", "google", "grok", "deepseek",
        ]
        assert [p["isConfigured"] for p in providers] == [True, False, True, False, False]
        assert providers[0]["name"] == "OpenAI"
        assert providers[0]["availableModels"][0]["maxTokens"] == 4096
        assert data["configuration"]["missingProviders"] == ["anthropic", "grok", "deepseek"]

    def test_model_list(self, client):
        """Test the model listing used by the dashboard's model selector."""
        response = client.get("/api/ai/generate")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["providers"] == ["openai", "google"]
        assert set(body["data"]["models"]) == {"openai", "google"}
        assert body["data"]["models"]["google"][0] == {
            "id": "gemini-1.5-pro",
            "name": "Gemini 1.5 Pro",
            "maxTokens": 8192,
        }
        assert [m["id"] for m in body["data"]["models"]["openai"]] == [
            "gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-3.5-turbo",
        ]

    def test_model_list_without_providers(self):
        """Test the model listing fails when no provider is configured."""
        gateway = make_gateway({
            provider: FakeProvider(provider, configured=False) for provider in ProviderId
        })
        with TestClient(create_app(gateway=gateway)) as client:
            response = client.get("/api/ai/generate")

        assert response.status_code == 500
        assert response.json()["detail"]["kind"] == "misconfigured_deployment"

    def test_health_degraded(self, client):
        """Test health reports missing providers."""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["service"] == "ai-gateway"
        assert body["configuration"]["isHealthy"] is False
        assert len(body["configuration"]["errors"]) == 3

    def test_health_healthy(self):
        """Test health with every provider configured."""
        gateway = make_gateway({provider: FakeProvider(provider) for provider in ProviderId})
        with TestClient(create_app(gateway=gateway)) as client:
            body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["configuration"]["errors"] == []

    def test_shutdown_closes_adapters(self, fakes):
        """Test adapters are released when the application stops."""
        with TestClient(create_app(gateway=make_gateway(fakes))):
            pass

        assert all(fake.closed for fake in fakes.values())
