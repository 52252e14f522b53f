"""
Gateway data models.
"""

from .catalog import MODEL_CATALOG, PROVIDER_NAMES, ModelDescriptor, ProviderId
from .request import GenerationRequest, Message
from .response import (
    ConfigurationReport,
    DiscoveryReport,
    ErrorDetail,
    ErrorKind,
    GenerationResponse,
    GenerationResult,
    ProviderReadiness,
    StreamEvent,
    StreamEventType,
    Usage,
)

__all__ = [
    "MODEL_CATALOG",
    "PROVIDER_NAMES",
    "ModelDescriptor",
    "ProviderId",
    "GenerationRequest",
    "Message",
    "ConfigurationReport",
    "DiscoveryReport",
    "ErrorDetail",
    "ErrorKind",
    "GenerationResponse",
    "GenerationResult",
    "ProviderReadiness",
    "StreamEvent",
    "StreamEventType",
    "Usage",
]
