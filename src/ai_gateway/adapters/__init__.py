"""
Provider adapters for the supported AI vendors.
"""

from .base import HTTPProviderAdapter
from .openai_adapter import OpenAIAdapter, OpenAICompatibleAdapter
from .anthropic_adapter import AnthropicAdapter
from .google_adapter import GoogleAdapter
from .grok_adapter import GrokAdapter
from .deepseek_adapter import DeepSeekAdapter
from ..models.catalog import ProviderId

ADAPTER_CLASSES = {
    ProviderId.OPENAI: OpenAIAdapter,
    ProviderId.ANTHROPIC: AnthropicAdapter,
    ProviderId.GOOGLE: GoogleAdapter,
    ProviderId.GROK: GrokAdapter,
    ProviderId.DEEPSEEK: DeepSeekAdapter,
}

__all__ = [
    "ADAPTER_CLASSES",
    "HTTPProviderAdapter",
    "OpenAICompatibleAdapter",
    "OpenAIAdapter",
    "AnthropicAdapter",
    "GoogleAdapter",
    "GrokAdapter",
    "DeepSeekAdapter",
]
