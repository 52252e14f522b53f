"""
Unified response, failure and discovery models for the generation gateway.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from .base import GatewayModel
from .catalog import ModelDescriptor, ProviderId


class ErrorKind(str, Enum):
    """Failure classes surfaced to gateway callers."""
    UNKNOWN_PROVIDER = "unknown_provider"
    PROVIDER_NOT_CONFIGURED = "provider_not_configured"
    UNKNOWN_MODEL = "unknown_model"
    STREAMING_UNSUPPORTED = "streaming_unsupported"
    UPSTREAM_ERROR = "upstream_error"
    MISCONFIGURED_DEPLOYMENT = "misconfigured_deployment"


class Usage(GatewayModel):
    """Token usage information."""
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class GenerationResponse(GatewayModel):
    """Normalized result of a non-streaming generation."""
    content: str
    model_id: str
    provider_id: str
    usage: Optional[Usage] = None

    @classmethod
    def from_openai(
        cls,
        data: Dict[str, Any],
        model: str,
        provider: str,
    ) -> "GenerationResponse":
        """Create from an OpenAI-compatible chat completion payload."""
        choices = data.get("choices") or [{}]
        message = choices[0].get("message") or {}

        usage = None
        usage_data = data.get("usage")
        if usage_data:
            input_tokens = usage_data.get("prompt_tokens", 0)
            output_tokens = usage_data.get("completion_tokens", 0)
            usage = Usage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=usage_data.get("total_tokens", input_tokens + output_tokens),
            )

        return cls(
            content=message.get("content") or "",
            model_id=model,
            provider_id=provider,
            usage=usage,
        )

    @classmethod
    def from_anthropic(
        cls,
        data: Dict[str, Any],
        model: str,
        provider: str,
    ) -> "GenerationResponse":
        """Create from an Anthropic messages payload."""
        content = "".join(
            block.get("text", "")
            for block in data.get("content", [])
            if block.get("type") == "text"
        )

        usage = None
        usage_data = data.get("usage")
        if usage_data:
            input_tokens = usage_data.get("input_tokens", 0)
            output_tokens = usage_data.get("output_tokens", 0)
            usage = Usage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens,
            )

        return cls(
            content=content,
            model_id=model,
            provider_id=provider,
            usage=usage,
        )

    @classmethod
    def from_google(
        cls,
        data: Dict[str, Any],
        model: str,
        provider: str,
    ) -> "GenerationResponse":
        """Create from a Gemini generateContent payload."""
        return cls(
            content=google_text(data),
            model_id=model,
            provider_id=provider,
            usage=google_usage(data),
        )


def google_text(data: Dict[str, Any]) -> str:
    """Concatenate the text parts of the first Gemini candidate."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)


def google_usage(data: Dict[str, Any]) -> Optional[Usage]:
    usage_data = data.get("usageMetadata")
    if not usage_data:
        return None
    input_tokens = usage_data.get("promptTokenCount", 0)
    output_tokens = usage_data.get("candidatesTokenCount", 0)
    return Usage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=usage_data.get("totalTokenCount", input_tokens + output_tokens),
    )


class ErrorDetail(GatewayModel):
    """Serializable description of a gateway failure."""
    kind: ErrorKind
    message: str
    provider: Optional[str] = None
    retryable: bool = False
    status_code: Optional[int] = None
    code: Optional[str] = None
    vendor_message: Optional[str] = None
    available_models: Optional[List[ModelDescriptor]] = None
    details: Optional[List[str]] = None


class GenerationResult(GatewayModel):
    """Either a response or an error, never both."""
    response: Optional[GenerationResponse] = None
    error: Optional[ErrorDetail] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, response: GenerationResponse) -> "GenerationResult":
        return cls(response=response)

    @classmethod
    def failure(cls, error: ErrorDetail) -> "GenerationResult":
        return cls(error=error)


class StreamEventType(str, Enum):
    """Kinds of events on a generation stream."""
    CONTENT = "content"
    DONE = "done"
    ERROR = "error"


SSE_DONE = "[DONE]"


class StreamEvent(GatewayModel):
    """One event forwarded to a streaming caller."""
    type: StreamEventType
    content: Optional[str] = None
    error: Optional[ErrorDetail] = None

    @classmethod
    def chunk(cls, content: str) -> "StreamEvent":
        return cls(type=StreamEventType.CONTENT, content=content)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(type=StreamEventType.DONE)

    @classmethod
    def failure(cls, error: ErrorDetail) -> "StreamEvent":
        return cls(type=StreamEventType.ERROR, error=error)

    @property
    def is_terminal(self) -> bool:
        return self.type != StreamEventType.CONTENT

    def to_sse(self) -> str:
        """Render as a server-sent event frame."""
        if self.type == StreamEventType.DONE:
            payload = SSE_DONE
        elif self.type == StreamEventType.ERROR:
            payload = json.dumps({"error": self.error.message if self.error else ""})
        else:
            payload = json.dumps({"content": self.content})
        return f"data: {payload}\n\n"


class ProviderReadiness(GatewayModel):
    """Configuration status and catalog of one provider."""
    provider_id: ProviderId
    name: str
    is_configured: bool
    supports_streaming: bool
    available_models: List[ModelDescriptor]


class ConfigurationReport(GatewayModel):
    """Which providers this deployment can use."""
    is_healthy: bool
    configured_providers: List[ProviderId]
    missing_providers: List[ProviderId]
    errors: List[str]


class DiscoveryReport(GatewayModel):
    """Everything a UI needs to populate provider and model selectors."""
    providers: List[ProviderReadiness]
    configuration: ConfigurationReport
