"""
xAI Grok adapter.

Grok exposes an OpenAI-compatible chat completions API.
"""

from ..models.catalog import ProviderId
from .openai_adapter import OpenAICompatibleAdapter


class GrokAdapter(OpenAICompatibleAdapter):
    """xAI Grok API adapter."""

    provider_id = ProviderId.GROK
    DEFAULT_BASE_URL = "https://api.x.ai/v1"
