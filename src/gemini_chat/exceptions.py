"""Domain exception hierarchy for the Gemini chat application."""

from __future__ import annotations


class GeminiChatError(RuntimeError):
    """Base class for all domain-level chat errors."""


class ConfigurationError(GeminiChatError):
    """Raised when the API credential is missing."""


class ConfigValidationError(GeminiChatError):
    """Raised when configuration cannot be validated safely."""


class TransportError(GeminiChatError):
    """Raised when the request fails or the API answers with a non-success status."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MalformedResponseError(GeminiChatError):
    """Raised when a successful response lacks the candidate/part/text shape."""
