"""
Unified generation request model.

Adapters translate this single shape into each vendor's native payload.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .base import GatewayModel


class Message(GatewayModel):
    """A single conversation turn."""
    role: Literal["system", "user", "assistant"]
    content: str


class GenerationRequest(GatewayModel):
    """
    Provider-agnostic generation request.

    ``provider`` and ``model`` are accepted as aliases of ``provider_id`` and
    ``model_id`` so dashboard payloads can be validated directly.
    """
    # Required
    provider_id: str = Field(..., alias="provider", description="Provider identifier")
    model_id: str = Field(..., alias="model", description="Model identifier")
    messages: List[Message] = Field(..., min_length=1, description="Conversation messages")

    # Optional parameters
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    top_p: Optional[float] = Field(default=None, ge=0, le=1)
    frequency_penalty: Optional[float] = Field(default=None, ge=-2, le=2)
    presence_penalty: Optional[float] = Field(default=None, ge=-2, le=2)
    stream: bool = Field(default=False)

    @classmethod
    def from_prompt(
        cls,
        provider: str,
        model: str,
        prompt: str,
        system_prompt: Optional[str] = None,
        **params: Any,
    ) -> "GenerationRequest":
        """Build a request from a single prompt and optional system prompt."""
        messages = []
        if system_prompt:
            messages.append(Message(role="system", content=system_prompt))
        messages.append(Message(role="user", content=prompt))
        return cls(provider_id=provider, model_id=model, messages=messages, **params)

    @property
    def system_prompt(self) -> Optional[str]:
        """All system messages joined, or None if there are none."""
        parts = [m.content for m in self.messages if m.role == "system"]
        return "\n\n".join(parts) if parts else None

    @property
    def turns(self) -> List[Message]:
        """Conversation without system messages."""
        return [m for m in self.messages if m.role != "system"]

    def to_openai_format(self, temperature: float, max_tokens: int) -> Dict[str, Any]:
        """
        Convert to the OpenAI chat completions format.

        Also used by the OpenAI-compatible Grok and DeepSeek APIs.

        Args:
            temperature: Temperature used when the request leaves it unset
            max_tokens: Token ceiling used when the request leaves it unset
        """
        data = {
            "model": self.model_id,
            "messages": [{"role": m.role, "content": m.content} for m in self.messages],
            "temperature": self.temperature if self.temperature is not None else temperature,
            "max_tokens": self.max_tokens or max_tokens,
        }

        for field in ("top_p", "frequency_penalty", "presence_penalty"):
            value = getattr(self, field)
            if value is not None:
                data[field] = value

        return data

    def to_anthropic_format(self, temperature: float, max_tokens: int) -> Dict[str, Any]:
        """Convert to the Anthropic messages format."""
        data = {
            "model": self.model_id,
            "messages": [{"role": m.role, "content": m.content} for m in self.turns],
            "max_tokens": self.max_tokens or max_tokens,
            "temperature": self.temperature if self.temperature is not None else temperature,
        }

        system = self.system_prompt
        if system:
            data["system"] = system

        if self.top_p is not None:
            data["top_p"] = self.top_p

        return data

    def to_google_format(self, temperature: float, max_tokens: int) -> Dict[str, Any]:
        """Convert to the Gemini generateContent format."""
        generation_config = {
            "temperature": self.temperature if self.temperature is not None else temperature,
            "maxOutputTokens": self.max_tokens or max_tokens,
        }
        if self.top_p is not None:
            generation_config["topP"] = self.top_p
        if self.frequency_penalty is not None:
            generation_config["frequencyPenalty"] = self.frequency_penalty
        if self.presence_penalty is not None:
            generation_config["presencePenalty"] = self.presence_penalty

        data = {
            # Gemini names the assistant role "model"
            "contents": [
                {
                    "role": "model" if m.role == "assistant" else "user",
                    "parts": [{"text": m.content}],
                }
                for m in self.turns
            ],
            "generationConfig": generation_config,
        }

        system = self.system_prompt
        if system:
            data["systemInstruction"] = {"parts": [{"text": system}]}

        return data
