"""
Direct Anthropic API adapter.

Anthropic takes system instructions as a separate ``system`` field rather
than a message, and streams typed events instead of completion deltas.
"""

import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Optional, Set

from ..core.interface import ProviderCapability
from ..models.catalog import ProviderId
from ..models.request import GenerationRequest
from ..models.response import GenerationResponse
from .base import HTTPProviderAdapter

logger = logging.getLogger(__name__)


class AnthropicAdapter(HTTPProviderAdapter):
    """
    Direct Anthropic API adapter.

    Connects to Anthropic's Messages API.
    """

    provider_id = ProviderId.ANTHROPIC
    DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
    ANTHROPIC_VERSION = "2023-06-01"

    @property
    def capabilities(self) -> Set[ProviderCapability]:
        return {
            ProviderCapability.GENERATION,
            ProviderCapability.STREAMING,
        }

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": self.ANTHROPIC_VERSION,
        }

    def _payload(self, request: GenerationRequest) -> Dict[str, Any]:
        return request.to_anthropic_format(
            temperature=self.default_temperature,
            max_tokens=self.default_max_tokens,
        )

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Create a message via the Anthropic API."""
        data = await self._post_json("/messages", self._payload(request))

        response = GenerationResponse.from_anthropic(
            data,
            model=request.model_id,
            provider=self.provider_id.value,
        )
        if not response.content:
            logger.warning(f"Anthropic returned no text content for {request.model_id}")
        return response

    async def generate_stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """Create a streaming message via the Anthropic API."""
        payload = self._payload(request)
        payload["stream"] = True

        async with aclosing(self._stream_json("/messages", payload)) as events:
            async for event in events:
                event_type = event.get("type")
                if event_type == "error":
                    self._raise_stream_error(event.get("error"))
                if event_type == "message_stop":
                    return

                text = self._parse_stream_event(event)
                if text:
                    yield text

    def _parse_stream_event(self, event: Dict[str, Any]) -> Optional[str]:
        """Extract text from a ``content_block_delta`` event."""
        if event.get("type") != "content_block_delta":
            return None
        delta = event.get("delta", {})
        if delta.get("type") == "text_delta":
            return delta.get("text")
        return None
