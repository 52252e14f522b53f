"""
Shared fixtures: fake provider adapters and configuration helpers.
"""
from typing import Callable, Dict, List, Optional

import httpx
import pytest

from ai_gateway.core.config import GatewayConfig, ProviderConfig
from ai_gateway.core.gateway import GenerationGateway
from ai_gateway.core.interface import AbstractProvider, ProviderCapability
from ai_gateway.core.registry import ProviderRegistry
from ai_gateway.core.validator import ConfigurationValidator
from ai_gateway.models.catalog import ProviderId
from ai_gateway.models.request import GenerationRequest
from ai_gateway.models.response import GenerationResponse


class FakeProvider(AbstractProvider):
    """In-memory adapter that records calls instead of using the network."""

    def __init__(
        self,
        provider_id: ProviderId,
        configured: bool = True,
        response: Optional[GenerationResponse] = None,
        error: Optional[Exception] = None,
        chunks: Optional[List[str]] = None,
        stream_error: Optional[Exception] = None,
        streaming: bool = True,
    ):
        self.provider_id = provider_id
        self._configured = configured
        self._response = response
        self._error = error
        self._chunks = chunks or []
        self._stream_error = stream_error
        self._streaming = streaming
        self.calls: List[GenerationRequest] = []
        self.stream_calls: List[GenerationRequest] = []
        self.stream_closed = False
        self.closed = False

    @property
    def capabilities(self):
        caps = {ProviderCapability.GENERATION}
        if self._streaming:
            caps.add(ProviderCapability.STREAMING)
        return caps

    def is_configured(self) -> bool:
        return self._configured

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.calls.append(request)
        if self._error is not None:
            raise self._error
        if self._response is not None:
            return self._response
        return GenerationResponse(
            content="ok",
            model_id=request.model_id,
            provider_id=self.provider_id.value,
        )

    async def generate_stream(self, request: GenerationRequest):
        self.stream_calls.append(request)
        try:
            for chunk in self._chunks:
                yield chunk
            if self._stream_error is not None:
                raise self._stream_error
        finally:
            self.stream_closed = True

    async def aclose(self) -> None:
        self.closed = True


def config_with_keys(*providers: ProviderId, **overrides) -> GatewayConfig:
    """Configuration where only the given providers have an API key."""
    return GatewayConfig(
        providers={
            provider: ProviderConfig(
                provider=provider,
                api_key="test-key" if provider in providers else None,
            )
            for provider in ProviderId
        },
        **overrides,
    )


def make_gateway(fakes: Dict[ProviderId, FakeProvider]) -> GenerationGateway:
    """Gateway over fake adapters; the validator agrees with their readiness."""
    configured = [p for p, fake in fakes.items() if fake.is_configured()]
    return GenerationGateway(
        ProviderRegistry(fakes),
        ConfigurationValidator(config_with_keys(*configured)),
    )


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """HTTP client whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def sse_body(*payloads: str) -> bytes:
    """Encode payloads as server-sent event frames."""
    return "".join(f"data: {p}\n\n" for p in payloads).encode()


@pytest.fixture
def fakes() -> Dict[ProviderId, FakeProvider]:
    """One configured fake adapter per provider."""
    return {provider: FakeProvider(provider) for provider in ProviderId}


@pytest.fixture
def gateway(fakes) -> GenerationGateway:
    return make_gateway(fakes)


def user_request(provider: str, model: str, **params) -> GenerationRequest:
    return GenerationRequest(
        provider=provider,
        model=model,
        messages=[{"role": "user", "content": "Say hi"}],
        **params,
    )
