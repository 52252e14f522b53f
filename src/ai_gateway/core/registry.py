"""
Provider registry holding one adapter per provider identifier.
"""

import logging
from typing import Dict, List, Mapping, Optional, Type, Union

import httpx

from .config import GatewayConfig
from .interface import AbstractProvider, ProviderCapability
from ..models.catalog import PROVIDER_NAMES, ProviderId, models_for
from ..models.response import ProviderReadiness

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Registry of provider adapters.

    Built once per process and shared read-only by all requests. Every
    identifier in the closed provider set can be looked up; a provider with
    no adapter is reported as unconfigured.
    """

    def __init__(self, adapters: Optional[Mapping[ProviderId, AbstractProvider]] = None):
        """
        Initialize the registry.

        Args:
            adapters: Adapters keyed by provider identifier
        """
        self._adapters: Dict[ProviderId, AbstractProvider] = {}
        for adapter in (adapters or {}).values():
            self.register(adapter)

    @classmethod
    def from_config(
        cls,
        config: GatewayConfig,
        adapter_classes: Optional[Mapping[ProviderId, Type[AbstractProvider]]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "ProviderRegistry":
        """
        Build a registry with one adapter for every provider.

        Adapters are created whether or not a key is configured; each one
        reports its own readiness through ``is_configured``.

        Args:
            config: Gateway configuration
            adapter_classes: Adapter class per provider (defaults to the built-ins)
            client: Optional HTTP client shared by all adapters
        """
        if adapter_classes is None:
            from ..adapters import ADAPTER_CLASSES
            adapter_classes = ADAPTER_CLASSES

        registry = cls()
        for provider in ProviderId:
            adapter = adapter_classes[provider].from_config(config, client=client)
            registry.register(adapter)

        configured = [p.value for p in registry.configured_providers()]
        logger.info(f"Provider registry built, configured: {configured or 'none'}")
        return registry

    def register(self, adapter: AbstractProvider) -> None:
        """
        Register an adapter under its provider identifier.

        Args:
            adapter: Adapter to register; replaces any previous one
        """
        self._adapters[ProviderId(adapter.provider_id)] = adapter

    def resolve(self, provider: Union[ProviderId, str]) -> Optional[AbstractProvider]:
        """
        Look up the adapter for a provider. Never performs network I/O.

        Args:
            provider: Provider identifier

        Returns:
            Adapter, or None if the identifier is unknown or has no adapter
        """
        if not isinstance(provider, ProviderId):
            provider = ProviderId.parse(provider)
            if provider is None:
                return None
        return self._adapters.get(provider)

    def configured_providers(self) -> List[ProviderId]:
        """Providers whose adapter reports a usable key."""
        return [
            provider for provider in ProviderId
            if provider in self._adapters and self._adapters[provider].is_configured()
        ]

    def readiness(self, provider: ProviderId) -> ProviderReadiness:
        """Configuration status and catalog of one provider."""
        adapter = self._adapters.get(provider)
        if adapter is None:
            return ProviderReadiness(
                provider_id=provider,
                name=PROVIDER_NAMES[provider],
                is_configured=False,
                supports_streaming=False,
                available_models=models_for(provider),
            )
        return ProviderReadiness(
            provider_id=provider,
            name=adapter.name,
            is_configured=adapter.is_configured(),
            supports_streaming=adapter.supports(ProviderCapability.STREAMING),
            available_models=adapter.get_available_models(),
        )

    def list_all(self) -> List[ProviderReadiness]:
        """
        Readiness of every provider in the closed set.

        Returns:
            One entry per provider identifier, configured or not
        """
        return [self.readiness(provider) for provider in ProviderId]

    async def aclose(self) -> None:
        """Close every adapter's network resources."""
        for adapter in self._adapters.values():
            try:
                await adapter.aclose()
            except Exception as e:
                logger.error(f"Failed to close adapter {adapter.name}: {e}")
