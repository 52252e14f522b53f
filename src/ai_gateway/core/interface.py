"""
Abstract provider interface definition.

Defines the contract that every vendor adapter implements.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import AsyncIterator, List, Set

from ..models.catalog import PROVIDER_NAMES, ModelDescriptor, ProviderId, models_for
from ..models.request import GenerationRequest
from ..models.response import GenerationResponse


class ProviderCapability(str, Enum):
    """Capabilities that a provider adapter may support."""
    GENERATION = "generation"
    STREAMING = "streaming"


class AbstractProvider(ABC):
    """
    Abstract base class for provider adapters.

    An adapter translates the uniform request/response contract to and from
    one vendor's native API and reports static facts about that vendor.
    """

    provider_id: ProviderId

    @property
    def name(self) -> str:
        """Human-readable provider name (e.g., "OpenAI", "Google AI")."""
        return PROVIDER_NAMES[self.provider_id]

    @property
    def capabilities(self) -> Set[ProviderCapability]:
        """
        Set of capabilities this adapter supports.

        Adapters that override ``generate_stream`` should add STREAMING.
        """
        return {ProviderCapability.GENERATION}

    @abstractmethod
    def is_configured(self) -> bool:
        """
        Whether a usable API key was supplied.

        Returns:
            True if the key is present and not a placeholder value
        """
        pass

    def get_available_models(self) -> List[ModelDescriptor]:
        """
        Static model catalog of this provider.

        Returns:
            Models in display order
        """
        return models_for(self.provider_id)

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """
        Issue one non-streaming generation call.

        Args:
            request: Generation request

        Returns:
            Generated content with usage when the vendor reports it

        Raises:
            ProviderNotConfiguredError: If no usable key is set
            UpstreamError: If the vendor call fails
        """
        pass

    def generate_stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """
        Stream generated text fragments in emission order.

        Closing the returned iterator early releases the network connection.

        Args:
            request: Generation request

        Yields:
            Text fragments
        """
        raise NotImplementedError(f"{self.name} does not support streaming")

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
        return None

    def supports(self, capability: ProviderCapability) -> bool:
        """
        Check if the adapter supports a capability.

        Args:
            capability: Capability to check

        Returns:
            True if supported
        """
        return capability in self.capabilities

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(provider={self.provider_id.value!r}, "
            f"configured={self.is_configured()!r})"
        )
