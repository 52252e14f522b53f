"""
Gateway error types.

Adapters and the registry raise these; the generation gateway catches them
and hands callers an ``ErrorDetail`` instead of an exception.
"""

from typing import List, Optional

from ..models.catalog import PROVIDER_NAMES, ModelDescriptor, ProviderId
from ..models.response import ErrorDetail, ErrorKind


class GatewayError(Exception):
    """Base exception for gateway errors."""

    kind: ErrorKind = ErrorKind.UPSTREAM_ERROR
    retryable: bool = False

    def __init__(self, message: str, provider: str = None):
        self.message = message
        self.provider = provider
        super().__init__(message)

    def to_detail(self) -> ErrorDetail:
        """Convert to the serializable failure payload."""
        return ErrorDetail(
            kind=self.kind,
            message=self.message,
            provider=self.provider,
            retryable=self.retryable,
        )


class UnknownProviderError(GatewayError):
    """Raised when a provider identifier is outside the closed set."""

    kind = ErrorKind.UNKNOWN_PROVIDER

    def __init__(self, provider: str):
        super().__init__(f"Unknown provider: {provider!r}", provider=provider)


class ProviderNotConfiguredError(GatewayError):
    """Raised when a known provider has no usable API key."""

    kind = ErrorKind.PROVIDER_NOT_CONFIGURED

    def __init__(self, provider: str):
        super().__init__(
            f"Provider '{provider}' is not configured. Please check your API key.",
            provider=provider,
        )


class UnknownModelError(GatewayError):
    """Raised when the requested model is not in the provider's catalog."""

    kind = ErrorKind.UNKNOWN_MODEL

    def __init__(
        self,
        provider: str,
        model: str,
        available_models: List[ModelDescriptor],
    ):
        valid = ", ".join(m.id for m in available_models)
        super().__init__(
            f"Model '{model}' is not available for provider '{provider}'. "
            f"Valid models: {valid}",
            provider=provider,
        )
        self.model = model
        self.available_models = list(available_models)

    def to_detail(self) -> ErrorDetail:
        detail = super().to_detail()
        detail.available_models = self.available_models
        return detail


class StreamingUnsupportedError(GatewayError):
    """Raised when streaming is requested from a provider that cannot stream."""

    kind = ErrorKind.STREAMING_UNSUPPORTED

    def __init__(self, provider: str):
        super().__init__(
            f"Provider '{provider}' does not support streaming.",
            provider=provider,
        )


class UpstreamError(GatewayError):
    """
    Raised when a vendor call fails.

    Covers authentication rejections, rate limits, malformed requests,
    network failures and vendor-side errors. The vendor message and status
    code are kept as reported.
    """

    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(
        self,
        message: str,
        provider: str = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.code = code
        # Rate limits and vendor-side 5xx may succeed later; the caller decides.
        self.retryable = status_code == 429 or (
            status_code is not None and status_code >= 500
        )

    def __str__(self) -> str:
        provider = ProviderId.parse(self.provider) if self.provider else None
        name = PROVIDER_NAMES[provider] if provider else self.provider
        prefix = f"{name} API error" if name else "API error"
        if self.status_code is not None:
            return f"{prefix}: {self.message} ({self.status_code})"
        return f"{prefix}: {self.message}"

    def to_detail(self) -> ErrorDetail:
        """Detail whose message names the provider; the vendor text is kept as is."""
        detail = super().to_detail()
        detail.message = str(self)
        detail.vendor_message = self.message
        detail.status_code = self.status_code
        detail.code = self.code
        return detail


class MisconfiguredDeploymentError(GatewayError):
    """Raised when no provider at all is usable."""

    kind = ErrorKind.MISCONFIGURED_DEPLOYMENT

    def __init__(self, errors: List[str]):
        super().__init__("Server configuration error: no AI provider is configured")
        self.errors = list(errors)

    def to_detail(self) -> ErrorDetail:
        detail = super().to_detail()
        detail.details = self.errors
        return detail
