"""
Generation gateway.

Single entry point for generation requests: resolves the provider adapter,
validates the model, dispatches, and turns every outcome into a typed
success or failure value. Nothing raised by an adapter escapes.
"""

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Tuple, Union

import httpx
from opentelemetry import trace

from .config import GatewayConfig, load_config
from .errors import (
    GatewayError,
    ProviderNotConfiguredError,
    StreamingUnsupportedError,
    UnknownModelError,
    UnknownProviderError,
    UpstreamError,
)
from .interface import AbstractProvider, ProviderCapability
from .registry import ProviderRegistry
from .validator import ConfigurationValidator
from ..models.catalog import ProviderId, find_model
from ..models.request import GenerationRequest
from ..models.response import (
    DiscoveryReport,
    ErrorDetail,
    GenerationResult,
    StreamEvent,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class StreamResult:
    """
    Outcome of opening a stream.

    Validation failures are reported in ``error`` before any network call;
    otherwise ``events`` yields content events and then one terminal event.
    """
    events: Optional[AsyncIterator[StreamEvent]] = None
    error: Optional[ErrorDetail] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class GenerationGateway:
    """
    Uniform generation interface over all registered providers.

    Stateless across requests; the registry and validator are shared.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        validator: ConfigurationValidator,
    ):
        self.registry = registry
        self.validator = validator

    def _validate(
        self,
        request: GenerationRequest,
    ) -> Tuple[AbstractProvider, GenerationRequest]:
        """
        Resolve the adapter and check the model.

        Returns:
            The adapter and the request with ``max_tokens`` capped at the
            model's ceiling

        Raises:
            UnknownProviderError, ProviderNotConfiguredError, UnknownModelError
        """
        provider = ProviderId.parse(request.provider_id)
        if provider is None:
            raise UnknownProviderError(request.provider_id)

        adapter = self.registry.resolve(provider)
        if adapter is None or not adapter.is_configured():
            raise ProviderNotConfiguredError(provider.value)

        models = adapter.get_available_models()
        model = find_model(models, request.model_id)
        if model is None:
            raise UnknownModelError(provider.value, request.model_id, models)

        if request.max_tokens is not None and request.max_tokens > model.max_tokens:
            logger.debug(
                f"Capping max_tokens {request.max_tokens} to {model.max_tokens} for {model.id}"
            )
            request = request.model_copy(update={"max_tokens": model.max_tokens})

        return adapter, request

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Run a non-streaming generation.

        Args:
            request: Generation request

        Returns:
            The adapter's response verbatim, or a classified failure
        """
        with tracer.start_as_current_span("gateway.generate") as span:
            span.set_attribute("ai.provider", request.provider_id)
            span.set_attribute("ai.model", request.model_id)

            try:
                adapter, request = self._validate(request)
                response = await adapter.generate(request)
            except GatewayError as e:
                span.set_attribute("ai.error", e.kind.value)
                _log_failure(request, e)
                return GenerationResult.failure(e.to_detail())
            except Exception as e:
                logger.exception(f"Unexpected error from {request.provider_id}: {e}")
                span.set_attribute("ai.error", "unexpected")
                return GenerationResult.failure(
                    UpstreamError(str(e), provider=request.provider_id).to_detail()
                )

            if response.usage is not None:
                span.set_attribute("ai.usage.total_tokens", response.usage.total_tokens)
            return GenerationResult.success(response)

    def open_stream(self, request: GenerationRequest) -> StreamResult:
        """
        Validate a streaming request and return its event sequence.

        Validation is synchronous; the network call starts when ``events``
        is first iterated. Closing ``events`` early cancels the upstream call.

        Args:
            request: Generation request

        Returns:
            A result holding either the event iterator or a failure
        """
        try:
            adapter, request = self._validate(request)
            if not adapter.supports(ProviderCapability.STREAMING):
                raise StreamingUnsupportedError(adapter.provider_id.value)
        except GatewayError as e:
            _log_failure(request, e)
            return StreamResult(error=e.to_detail())

        return StreamResult(events=self._forward(adapter, request))

    async def _forward(
        self,
        adapter: AbstractProvider,
        request: GenerationRequest,
    ) -> AsyncIterator[StreamEvent]:
        """Relay adapter chunks in order, then a done or error event."""
        span = tracer.start_span("gateway.stream")
        span.set_attribute("ai.provider", request.provider_id)
        span.set_attribute("ai.model", request.model_id)

        chunks = adapter.generate_stream(request)
        count = 0
        try:
            async for chunk in chunks:
                count += 1
                yield StreamEvent.chunk(chunk)
        except GatewayError as e:
            span.set_attribute("ai.error", e.kind.value)
            _log_failure(request, e)
            yield StreamEvent.failure(e.to_detail())
            return
        except Exception as e:
            logger.exception(f"Unexpected stream error from {request.provider_id}: {e}")
            span.set_attribute("ai.error", "unexpected")
            yield StreamEvent.failure(
                UpstreamError(str(e), provider=request.provider_id).to_detail()
            )
            return
        finally:
            aclose = getattr(chunks, "aclose", None)
            if aclose is not None:
                await aclose()
            span.set_attribute("ai.stream.chunks", count)
            span.end()

        yield StreamEvent.done()

    async def dispatch(
        self,
        request: GenerationRequest,
    ) -> Union[GenerationResult, StreamResult]:
        """Generate or stream depending on ``request.stream``."""
        if request.stream:
            return self.open_stream(request)
        return await self.generate(request)

    def discover(self) -> DiscoveryReport:
        """
        Configuration status and model catalog of every provider.

        Returns:
            Readiness for the full provider set and a configuration report
        """
        return DiscoveryReport(
            providers=self.registry.list_all(),
            configuration=self.validator.validate(),
        )


def _log_failure(request: GenerationRequest, error: GatewayError) -> None:
    if isinstance(error, UpstreamError):
        logger.error(f"Generation failed for {request.provider_id}/{request.model_id}: {error}")
    else:
        logger.warning(
            f"Rejected request for {request.provider_id}/{request.model_id}: {error.message}"
        )


def build_gateway(
    config: Optional[GatewayConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> GenerationGateway:
    """
    Build a gateway with adapters for every provider.

    Args:
        config: Gateway configuration; loaded from the environment if None
        client: Optional HTTP client shared by all adapters

    Returns:
        Gateway owning a fresh registry and validator
    """
    if config is None:
        config = load_config()
    return GenerationGateway(
        ProviderRegistry.from_config(config, client=client),
        ConfigurationValidator(config),
    )
