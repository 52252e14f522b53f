"""
Core gateway components.
"""

from .interface import AbstractProvider, ProviderCapability
from .registry import ProviderRegistry
from .config import GatewayConfig, ProviderConfig, load_config
from .validator import ConfigurationValidator
from .gateway import GenerationGateway, StreamResult, build_gateway
from .errors import (
    GatewayError,
    UnknownProviderError,
    ProviderNotConfiguredError,
    UnknownModelError,
    StreamingUnsupportedError,
    UpstreamError,
    MisconfiguredDeploymentError,
)

__all__ = [
    "AbstractProvider",
    "ProviderCapability",
    "ProviderRegistry",
    "GatewayConfig",
    "ProviderConfig",
    "load_config",
    "ConfigurationValidator",
    "GenerationGateway",
    "StreamResult",
    "build_gateway",
    "GatewayError",
    "UnknownProviderError",
    "ProviderNotConfiguredError",
    "UnknownModelError",
    "StreamingUnsupportedError",
    "UpstreamError",
    "MisconfiguredDeploymentError",
]
