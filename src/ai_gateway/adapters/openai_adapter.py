"""
OpenAI chat completions adapter.

Also the base for vendors that expose an OpenAI-compatible API (Grok,
DeepSeek); those only differ in endpoint and catalog.
"""

import logging
from contextlib import aclosing
from typing import AsyncIterator, Dict, Set

from ..core.interface import ProviderCapability
from ..models.catalog import ProviderId
from ..models.request import GenerationRequest
from ..models.response import GenerationResponse
from .base import HTTPProviderAdapter

logger = logging.getLogger(__name__)


class OpenAICompatibleAdapter(HTTPProviderAdapter):
    """Adapter for APIs speaking the OpenAI ``/chat/completions`` protocol."""

    @property
    def capabilities(self) -> Set[ProviderCapability]:
        return {
            ProviderCapability.GENERATION,
            ProviderCapability.STREAMING,
        }

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def _payload(self, request: GenerationRequest) -> Dict:
        return request.to_openai_format(
            temperature=self.default_temperature,
            max_tokens=self.default_max_tokens,
        )

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Create a chat completion."""
        data = await self._post_json("/chat/completions", self._payload(request))

        response = GenerationResponse.from_openai(
            data,
            model=request.model_id,
            provider=self.provider_id.value,
        )
        if not response.content:
            logger.warning(f"{self.name} returned no content for {request.model_id}")
        return response

    async def generate_stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """Create a streaming chat completion."""
        payload = self._payload(request)
        payload["stream"] = True

        async with aclosing(self._stream_json("/chat/completions", payload)) as chunks:
            async for chunk in chunks:
                if chunk.get("error"):
                    self._raise_stream_error(chunk["error"])

                choices = chunk.get("choices") or []
                if not choices:
                    continue
                content = (choices[0].get("delta") or {}).get("content")
                if content:
                    yield content


class OpenAIAdapter(OpenAICompatibleAdapter):
    """Direct OpenAI API adapter."""

    provider_id = ProviderId.OPENAI
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
