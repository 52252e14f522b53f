"""
Shared HTTP plumbing for vendor adapters.

Every vendor is reached over HTTPS with JSON bodies; this module owns the
client lifecycle, vendor error translation and server-sent event reading.
"""

import json
import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from ..core.config import GatewayConfig, is_usable_key
from ..core.errors import ProviderNotConfiguredError, UpstreamError
from ..core.interface import AbstractProvider
from .sse import iter_sse_data

logger = logging.getLogger(__name__)


class HTTPProviderAdapter(AbstractProvider):
    """
    Base class for adapters that call a vendor REST API with httpx.

    Subclasses set ``provider_id`` and ``DEFAULT_BASE_URL`` and implement
    ``_headers``.
    """

    DEFAULT_BASE_URL: str = ""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        default_temperature: float = 0.7,
        default_max_tokens: int = 1000,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the adapter.

        Args:
            api_key: Vendor API key
            base_url: API URL override (defaults to the vendor's public endpoint)
            timeout: Request timeout in seconds
            default_temperature: Temperature when a request leaves it unset
            default_max_tokens: Token ceiling when a request leaves it unset
            client: Shared HTTP client; one is created lazily when omitted
        """
        self._api_key = api_key
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._timeout = timeout
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(
        cls,
        config: GatewayConfig,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "HTTPProviderAdapter":
        """Create an adapter from gateway configuration."""
        provider_config = config.provider(cls.provider_id)
        return cls(
            api_key=provider_config.api_key,
            base_url=provider_config.base_url,
            timeout=config.timeout_for(cls.provider_id),
            default_temperature=config.default_temperature,
            default_max_tokens=config.default_max_tokens,
            client=client,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def is_configured(self) -> bool:
        return is_usable_key(self._api_key)

    def _headers(self) -> Dict[str, str]:
        """Authentication and content headers for every call."""
        raise NotImplementedError

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            logger.info(f"Created HTTP client for {self.name} at {self._base_url}")
        return self._client

    def _require_configured(self) -> None:
        if not self.is_configured():
            raise ProviderNotConfiguredError(self.provider_id.value)

    async def aclose(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.info(f"Closed HTTP client for {self.name}")

    async def _post_json(
        self,
        path: str,
        payload: Dict[str, Any],
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        POST a JSON body and return the decoded JSON response.

        Raises:
            ProviderNotConfiguredError: If no usable key is set
            UpstreamError: On transport failure, error status or invalid JSON
        """
        self._require_configured()
        client = self._get_client()

        try:
            response = await client.post(
                self._url(path),
                json=payload,
                headers=self._headers(),
                params=params,
            )
        except httpx.HTTPError as e:
            raise UpstreamError(
                f"Request failed: {e}",
                provider=self.provider_id.value,
            ) from e

        self._check_response_errors(response)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                "Invalid JSON in response",
                provider=self.provider_id.value,
                status_code=response.status_code,
            ) from e

    async def _stream_events(
        self,
        path: str,
        payload: Dict[str, Any],
        params: Optional[Dict[str, str]] = None,
    ) -> AsyncIterator[str]:
        """
        POST a JSON body and yield the data payload of each server-sent event.

        The response is read inside ``client.stream`` so closing this
        generator closes the connection.
        """
        self._require_configured()
        client = self._get_client()

        try:
            async with client.stream(
                "POST",
                self._url(path),
                json=payload,
                headers=self._headers(),
                params=params,
            ) as response:
                if response.status_code >= 400:
                    await response.aread()
                    self._check_response_errors(response)

                async with aclosing(iter_sse_data(response.aiter_lines())) as events:
                    async for data in events:
                        yield data

        except httpx.HTTPError as e:
            raise UpstreamError(
                f"Stream failed: {e}",
                provider=self.provider_id.value,
            ) from e

    async def _stream_json(
        self,
        path: str,
        payload: Dict[str, Any],
        params: Optional[Dict[str, str]] = None,
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Like ``_stream_events`` but decode each payload as a JSON object.

        Raises:
            UpstreamError: At the first payload that is not a JSON object
        """
        async with aclosing(self._stream_events(path, payload, params)) as events:
            async for data in events:
                try:
                    chunk = json.loads(data)
                except json.JSONDecodeError as e:
                    raise UpstreamError(
                        f"Malformed stream chunk: {data[:100]}",
                        provider=self.provider_id.value,
                    ) from e
                if not isinstance(chunk, dict):
                    raise UpstreamError(
                        f"Unexpected stream chunk: {data[:100]}",
                        provider=self.provider_id.value,
                    )
                yield chunk

    def _check_response_errors(self, response: httpx.Response) -> None:
        """Raise UpstreamError for a non-2xx vendor response."""
        if response.status_code < 400:
            return

        message, code = _vendor_error(response)
        logger.error(
            f"{self.name} request failed: {response.status_code} - {message}"
        )
        raise UpstreamError(
            message,
            provider=self.provider_id.value,
            status_code=response.status_code,
            code=code,
        )

    def _raise_stream_error(self, error: Any) -> None:
        """Raise UpstreamError for an error object sent inside a stream."""
        if isinstance(error, dict):
            message = error.get("message") or str(error)
            code = error.get("type") or error.get("code") or error.get("status")
        else:
            message, code = str(error), None
        raise UpstreamError(
            message,
            provider=self.provider_id.value,
            code=str(code) if code is not None else None,
        )


def _vendor_error(response: httpx.Response):
    """
    Extract the vendor's message and error code from an error response.

    OpenAI-compatible APIs, Anthropic and Gemini all nest the details under
    an ``error`` object; anything else falls back to the raw body.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            code = error.get("type") or error.get("code") or error.get("status")
            message = error.get("message") or response.reason_phrase
            return message, str(code) if code is not None else None
        if isinstance(error, str):
            return error, None
        if data.get("message"):
            return str(data["message"]), None

    return response.text or response.reason_phrase, None
