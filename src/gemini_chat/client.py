"""Single-shot client for the Gemini ``generateContent`` endpoint."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError, MalformedResponseError, TransportError

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 500


class _Part(BaseModel):
    model_config = ConfigDict(extra="ignore")
    text: str | None = None


class _Content(BaseModel):
    model_config = ConfigDict(extra="ignore")
    parts: list[_Part] = Field(default_factory=list)


class _Candidate(BaseModel):
    model_config = ConfigDict(extra="ignore")
    content: _Content | None = None


class GenerateContentResponse(BaseModel):
    """The subset of the ``generateContent`` response this client reads."""

    model_config = ConfigDict(extra="ignore")
    candidates: list[_Candidate] = Field(default_factory=list)

    def first_text(self) -> str:
        """Return the first candidate's first text part or raise."""
        if not self.candidates:
            raise MalformedResponseError("Response contained no candidates.")
        content = self.candidates[0].content
        if content is None or not content.parts:
            raise MalformedResponseError("First candidate has no content parts.")
        text = content.parts[0].text
        if text is None:
            raise MalformedResponseError("First content part has no text.")
        return text


class GeminiClient:
    """Send one prompt, get one reply. No retries, no streaming."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key.strip()
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, prompt: str) -> dict[str, Any]:
        """Build the JSON request body for ``prompt``."""
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    async def complete(self, prompt: str) -> str:
        """Return the model's reply to ``prompt``.

        Raises:
            ValueError: ``prompt`` is empty.
            ConfigurationError: no API key is configured. Nothing is sent.
            TransportError: the request failed or returned a non-2xx status.
            MalformedResponseError: the body lacks candidate/part text.
        """
        if not prompt.strip():
            raise ValueError("prompt must not be empty")
        if not self.has_credential:
            raise ConfigurationError("Gemini API key is not configured.")

        started = time.monotonic()
        LOGGER.info(
            "chat.request.start",
            extra={
                "event": "chat.request.start",
                "model": self.model,
                "prompt_chars": len(prompt),
            },
        )
        try:
            response = await self._http.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self.build_payload(prompt),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Request to Gemini failed: {exc}") from exc

        if not response.is_success:
            raise TransportError(
                f"Gemini API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            parsed = GenerateContentResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise MalformedResponseError(
                f"Unexpected Gemini response body: {exc}"
            ) from exc
        reply = parsed.first_text()

        LOGGER.info(
            "chat.request.completed",
            extra={
                "event": "chat.request.completed",
                "model": self.model,
                "status_code": response.status_code,
                "elapsed_ms": int((time.monotonic() - started) * 1000),
                "reply_chars": len(reply),
            },
        )
        return reply

    async def aclose(self) -> None:
        """Close the HTTP client when this instance created it."""
        if self._owns_client:
            await self._http.aclose()
