"""
Google AI (Gemini) adapter.

Talks to the Generative Language API with an API key. Gemini calls the
assistant role "model" and takes system instructions separately.
"""

import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Set

from ..core.interface import ProviderCapability
from ..models.catalog import ProviderId
from ..models.request import GenerationRequest
from ..models.response import GenerationResponse, google_text
from .base import HTTPProviderAdapter

logger = logging.getLogger(__name__)


class GoogleAdapter(HTTPProviderAdapter):
    """
    Google AI Gemini adapter.

    Supports:
    - Gemini 1.5 Pro, Flash
    - Gemini 1.0 Pro
    """

    provider_id = ProviderId.GOOGLE
    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    @property
    def capabilities(self) -> Set[ProviderCapability]:
        return {
            ProviderCapability.GENERATION,
            ProviderCapability.STREAMING,
        }

    def _headers(self) -> Dict[str, str]:
        # Header auth keeps the key out of request URLs and their logs
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }

    def _model_path(self, model: str, method: str) -> str:
        return f"/models/{model}:{method}"

    def _payload(self, request: GenerationRequest) -> Dict[str, Any]:
        return request.to_google_format(
            temperature=self.default_temperature,
            max_tokens=self.default_max_tokens,
        )

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Generate content with a Gemini model."""
        data = await self._post_json(
            self._model_path(request.model_id, "generateContent"),
            self._payload(request),
        )

        response = GenerationResponse.from_google(
            data,
            model=request.model_id,
            provider=self.provider_id.value,
        )
        if not response.content:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            logger.warning(
                f"Google AI returned no content for {request.model_id}"
                + (f" (blocked: {block_reason})" if block_reason else "")
            )
        return response

    async def generate_stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """Stream content from a Gemini model."""
        chunks = self._stream_json(
            self._model_path(request.model_id, "streamGenerateContent"),
            self._payload(request),
            params={"alt": "sse"},
        )
        async with aclosing(chunks):
            async for chunk in chunks:
                if chunk.get("error"):
                    self._raise_stream_error(chunk["error"])

                text = google_text(chunk)
                if text:
                    yield text
