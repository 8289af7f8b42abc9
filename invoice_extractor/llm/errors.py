"""Exceptions raised by the extraction gateway."""

from typing import Any, Optional


class LLMClientError(Exception):
    """Base exception for LLM client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class LLMConnectionError(LLMClientError):
    """Error connecting to the LLM service."""
    pass


class GatewayRequestError(LLMClientError):
    """Extraction request is missing the image payload or prompt."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class GatewayConfigurationError(LLMClientError):
    """Server-side configuration is incomplete (e.g. no API key)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


class UpstreamError(LLMClientError):
    """The inference endpoint returned a non-success status."""

    def __init__(self, status_code: int, details: Any = None):
        super().__init__(f"Upstream error (status {status_code})", status_code, details)


class LLMResponseError(LLMClientError):
    """Error in LLM response."""
    pass


class NoStructuredResultError(LLMResponseError):
    """The response envelope carries no candidate text."""
    pass


class InvalidResponseError(LLMResponseError):
    """The candidate text is not the expected JSON object."""
    pass
