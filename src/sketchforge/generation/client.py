"""Text-generation API client.

This module provides an async HTTP client for the two supported providers
(Anthropic Messages API and OpenAI Responses API). Each call is a single
request/response round trip: there are no retries, and retry policy is left
to whoever re-invokes the export.

The API key is only ever placed in request headers. Error messages raised
from this module are redacted before they leave it.

Example usage:
    >>> from sketchforge.config import ModelConfig
    >>> credentials = Credentials(provider="anthropic", api_key="sk-...")
    >>> async with ModelClient(ModelConfig()) as client:
    ...     text = await client.generate("Say hi", "claude-sonnet-4-5", credentials)
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, SecretStr, field_validator

from sketchforge.config import DEFAULT_MODELS, ModelConfig
from sketchforge.generation.errors import redact

logger = structlog.get_logger(__name__)

PROVIDER_BASE_URLS: dict[str, str] = {
    "anthropic": "https://api.anthropic.com",
    "openai": "https://api.openai.com",
}

ANTHROPIC_VERSION = "2023-06-01"


class Credentials(BaseModel):
    """Provider credentials for model-augmented generation.

    Attributes:
        provider: Provider the key belongs to
        api_key: API key; never rendered by repr or str
    """

    model_config = ConfigDict(frozen=True)

    provider: str
    api_key: SecretStr

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in DEFAULT_MODELS:
            raise ValueError(f"Invalid provider: {v}. Must be one of {set(DEFAULT_MODELS)}")
        return v_lower

    def secret(self) -> str:
        return self.api_key.get_secret_value()


class ModelClientError(Exception):
    """Base exception for model client errors."""

    pass


class ModelTimeoutError(ModelClientError):
    """Raised when a generation request times out."""

    pass


class ModelConnectionError(ModelClientError):
    """Raised when unable to connect to the provider."""

    pass


class ModelAPIError(ModelClientError):
    """Raised when the provider returns an error response.

    Attributes:
        status_code: HTTP status code of the response
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class EmptyResponseError(ModelClientError):
    """Raised when the provider returns no text."""

    pass


def _anthropic_text(data: dict[str, Any]) -> str:
    blocks = data.get("content") or []
    return "".join(
        block.get("text", "") for block in blocks if isinstance(block, dict) and block.get("type") == "text"
    )


def _openai_text(data: dict[str, Any]) -> str:
    if isinstance(data.get("output_text"), str):
        return data["output_text"]
    parts: list[str] = []
    for item in data.get("output") or []:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        for content in item.get("content") or []:
            if isinstance(content, dict) and content.get("type") == "output_text":
                parts.append(content.get("text", ""))
    return "".join(parts)


class ModelClient:
    """Async client for single-shot text generation.

    Attributes:
        config: Model configuration containing timeout, output budget and base URL
    """

    def __init__(self, config: ModelConfig) -> None:
        self.config = config
        self._client: httpx.AsyncClient | None = None
        logger.info(
            "model_client_initialized",
            provider=config.provider,
            timeout=config.timeout_seconds,
            max_output_tokens=config.max_output_tokens,
        )

    async def __aenter__(self) -> ModelClient:
        """Async context manager entry."""
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.config.timeout_seconds))
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get the active HTTP client.

        Raises:
            RuntimeError: If called outside async context manager
        """
        if self._client is None:
            raise RuntimeError("ModelClient must be used as async context manager")
        return self._client

    def _base_url(self, provider: str) -> str:
        return (self.config.base_url or PROVIDER_BASE_URLS[provider]).rstrip("/")

    def _request(
        self, prompt: str, model_id: str, credentials: Credentials
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        base_url = self._base_url(credentials.provider)
        if credentials.provider == "anthropic":
            headers = {
                "x-api-key": credentials.secret(),
                "anthropic-version": ANTHROPIC_VERSION,
                "content-type": "application/json",
            }
            payload: dict[str, Any] = {
                "model": model_id,
                "max_tokens": self.config.max_output_tokens,
                "messages": [{"role": "user", "content": prompt}],
            }
            return f"{base_url}/v1/messages", headers, payload

        headers = {
            "Authorization": f"Bearer {credentials.secret()}",
            "content-type": "application/json",
        }
        payload = {
            "model": model_id,
            "input": prompt,
            "max_output_tokens": self.config.max_output_tokens,
        }
        return f"{base_url}/v1/responses", headers, payload

    async def generate(self, prompt: str, model_id: str, credentials: Credentials) -> str:
        """Generate text for a prompt in one round trip.

        Args:
            prompt: Full instruction text
            model_id: Provider model identifier
            credentials: Provider and API key

        Returns:
            Generated text with surrounding whitespace stripped

        Raises:
            ModelTimeoutError: If the request times out
            ModelConnectionError: If the provider cannot be reached
            ModelAPIError: If the provider returns a non-2xx response or malformed body
            EmptyResponseError: If the response carries no text
        """
        client = self._get_client()
        url, headers, payload = self._request(prompt, model_id, credentials)
        secret = credentials.secret()

        logger.debug(
            "model_request",
            provider=credentials.provider,
            model_id=model_id,
            prompt_length=len(prompt),
        )

        try:
            response = await client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            logger.error(
                "model_request_timeout",
                provider=credentials.provider,
                timeout_seconds=self.config.timeout_seconds,
            )
            raise ModelTimeoutError(
                f"Request timed out after {self.config.timeout_seconds}s"
            ) from e
        except (httpx.ConnectError, httpx.NetworkError) as e:
            logger.error("model_connection_error", provider=credentials.provider)
            raise ModelConnectionError(
                redact(f"Failed to connect to {credentials.provider}: {e}", secret)
            ) from e

        if response.status_code != 200:
            error_msg = f"API error: HTTP {response.status_code}"
            try:
                error_msg = f"{error_msg}: {response.json()}"
            except ValueError:
                error_msg = f"{error_msg}: {response.text}"
            logger.warning(
                "model_api_error",
                provider=credentials.provider,
                status_code=response.status_code,
            )
            raise ModelAPIError(redact(error_msg, secret), status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ModelAPIError("Invalid response format: body is not JSON") from e
        if not isinstance(data, dict):
            raise ModelAPIError("Invalid response format: expected a JSON object")

        if credentials.provider == "anthropic":
            text = _anthropic_text(data)
        else:
            text = _openai_text(data)

        text = text.strip()
        if not text:
            raise EmptyResponseError("No content returned")

        logger.info(
            "model_response",
            provider=credentials.provider,
            model_id=model_id,
            output_length=len(text),
        )
        return text
