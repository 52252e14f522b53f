"""
DeepSeek adapter.

DeepSeek exposes an OpenAI-compatible chat completions API.
"""

from ..models.catalog import ProviderId
from .openai_adapter import OpenAICompatibleAdapter


class DeepSeekAdapter(OpenAICompatibleAdapter):
    """DeepSeek API adapter."""

    provider_id = ProviderId.DEEPSEEK
    DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
