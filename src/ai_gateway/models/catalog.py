"""
Static provider and model catalog.

The set of providers is closed and every provider has a fixed, ordered list
of selectable models with their output-token ceilings.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from .base import GatewayModel


class ProviderId(str, Enum):
    """Identifiers of the supported upstream AI vendors."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    GROK = "grok"
    DEEPSEEK = "deepseek"

    @classmethod
    def parse(cls, value: str) -> Optional["ProviderId"]:
        """Return the matching identifier, or None if not in the closed set."""
        try:
            return cls(value)
        except ValueError:
            return None


class ModelDescriptor(GatewayModel):
    """A selectable model and its output-token ceiling."""
    id: str
    display_name: str
    max_tokens: int

    class Config:
        frozen = True


PROVIDER_NAMES: Dict[ProviderId, str] = {
    ProviderId.OPENAI: "OpenAI",
    ProviderId.ANTHROPIC: "Anthropic",
    ProviderId.GOOGLE: "Google AI",
    ProviderId.GROK: "Grok",
    ProviderId.DEEPSEEK: "DeepSeek",
}


def _models(*entries: Tuple[str, str, int]) -> Tuple[ModelDescriptor, ...]:
    return tuple(
        ModelDescriptor(id=model_id, display_name=name, max_tokens=max_tokens)
        for model_id, name, max_tokens in entries
    )


MODEL_CATALOG: Dict[ProviderId, Tuple[ModelDescriptor, ...]] = {
    ProviderId.OPENAI: _models(
        ("gpt-4o", "GPT-4o", 4096),
        ("gpt-4o-mini", "GPT-4o Mini", 4096),
        ("gpt-4-turbo", "GPT-4 Turbo", 4096),
        ("gpt-3.5-turbo", "GPT-3.5 Turbo", 4096),
    ),
    ProviderId.ANTHROPIC: _models(
        ("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet", 8192),
        ("claude-3-5-haiku-20241022", "Claude 3.5 Haiku", 8192),
        ("claude-3-opus-20240229", "Claude 3 Opus", 4096),
    ),
    ProviderId.GOOGLE: _models(
        ("gemini-1.5-pro", "Gemini 1.5 Pro", 8192),
        ("gemini-1.5-flash", "Gemini 1.5 Flash", 8192),
        ("gemini-pro", "Gemini Pro", 4096),
    ),
    ProviderId.GROK: _models(
        ("grok-beta", "Grok Beta", 4096),
        ("grok-vision-beta", "Grok Vision Beta", 4096),
    ),
    ProviderId.DEEPSEEK: _models(
        ("deepseek-chat", "DeepSeek Chat", 4096),
        ("deepseek-coder", "DeepSeek Coder", 4096),
    ),
}


def models_for(provider: ProviderId) -> List[ModelDescriptor]:
    """Catalog of a provider, in display order."""
    return list(MODEL_CATALOG[provider])


def find_model(
    models: List[ModelDescriptor],
    model_id: str,
) -> Optional[ModelDescriptor]:
    """Look up a model by id in a catalog."""
    for model in models:
        if model.id == model_id:
            return model
    return None
