"""
AI Generation Gateway

One interface over several AI text-generation vendors:
- Closed provider set (OpenAI, Anthropic, Google, Grok, DeepSeek)
- Static model catalogs validated before any vendor call
- Buffered and streamed generation with typed failures
- Environment-driven configuration and readiness reporting
"""

from .core.interface import AbstractProvider, ProviderCapability
from .core.registry import ProviderRegistry
from .core.config import GatewayConfig, load_config
from .core.validator import ConfigurationValidator
from .core.gateway import GenerationGateway, StreamResult, build_gateway
from .models.catalog import ModelDescriptor, ProviderId
from .models.request import GenerationRequest, Message
from .models.response import (
    ConfigurationReport,
    ErrorDetail,
    ErrorKind,
    GenerationResponse,
    GenerationResult,
    ProviderReadiness,
    StreamEvent,
    Usage,
)

__all__ = [
    "AbstractProvider",
    "ProviderCapability",
    "ProviderRegistry",
    "GatewayConfig",
    "load_config",
    "ConfigurationValidator",
    "GenerationGateway",
    "StreamResult",
    "build_gateway",
    "ModelDescriptor",
    "ProviderId",
    "GenerationRequest",
    "Message",
    "ConfigurationReport",
    "ErrorDetail",
    "ErrorKind",
    "GenerationResponse",
    "GenerationResult",
    "ProviderReadiness",
    "StreamEvent",
    "Usage",
]
