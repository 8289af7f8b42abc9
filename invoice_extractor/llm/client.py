"""
Gemini client for invoice field extraction.

Sends one base64-encoded invoice image plus the extraction prompt to the
generateContent endpoint and returns the parsed fields. A single attempt is
made per call; failures are raised to the caller.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from invoice_extractor.config import GeminiConfig, get_config
from invoice_extractor.llm.errors import (
    GatewayConfigurationError,
    GatewayRequestError,
    LLMConnectionError,
    LLMResponseError,
    UpstreamError,
)
from invoice_extractor.llm.parser import InvoiceParser
from invoice_extractor.llm.prompts import get_extraction_prompt, get_generation_config
from invoice_extractor.models.invoice import InvoiceFields

logger = logging.getLogger(__name__)


class BaseExtractionClient(ABC):
    """Abstract base class for extraction gateways."""

    @abstractmethod
    async def extract_fields(self, image_base64: str, prompt: Optional[str] = None) -> InvoiceFields:
        """Extract invoice fields from a base64-encoded image."""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the provider name."""
        pass


class GeminiClient(BaseExtractionClient):
    """
    Client for the Gemini generateContent API.

    Can be used with a shared ``httpx.AsyncClient`` (pass ``http_client`` or
    use ``async with GeminiClient() as client``) or standalone, in which case
    each call opens its own connection.
    """

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the Gemini client.

        Args:
            config: Gemini configuration (uses the global config if not provided)
            http_client: Optional shared HTTP client
        """
        self.config = config or get_config().gemini
        self.parser = InvoiceParser()
        self._http = http_client
        self._owns_http = False

    async def __aenter__(self) -> "GeminiClient":
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.config.timeout)
            self._owns_http = True
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._owns_http and self._http is not None:
            await self._http.aclose()
            self._http = None
            self._owns_http = False

    def get_provider_name(self) -> str:
        return "Gemini"

    def _get_headers(self) -> dict:
        """Get request headers with authentication."""
        return {
            "x-goog-api-key": self.config.api_key,
            "Content-Type": "application/json",
        }

    def build_payload(self, image_base64: str, prompt: str) -> dict:
        """Build the generateContent request body."""
        return {
            "contents": [{
                "parts": [
                    {"text": prompt},
                    {"inlineData": {"mimeType": self.config.mime_type, "data": image_base64}},
                ]
            }],
            "generationConfig": get_generation_config(),
        }

    async def extract_fields(self, image_base64: str, prompt: Optional[str] = None) -> InvoiceFields:
        """
        Extract invoice fields from one image.

        Args:
            image_base64: Base64-encoded image content
            prompt: Extraction prompt (defaults to the invoice prompt)

        Returns:
            Parsed InvoiceFields

        Raises:
            GatewayRequestError: Missing image payload or prompt
            GatewayConfigurationError: No API key configured
            UpstreamError: Non-success response from Gemini
            LLMConnectionError: Transport failure
            LLMResponseError: Response carries no usable structured result
        """
        prompt = get_extraction_prompt() if prompt is None else prompt
        if not image_base64 or not prompt:
            raise GatewayRequestError("Missing base64ImageData or prompt")

        if not self.config.api_key:
            raise GatewayConfigurationError("Server misconfigured: missing GEMINI_API_KEY")

        payload = self.build_payload(image_base64, prompt)

        if self._http is not None:
            response = await self._post(self._http, payload)
        else:
            async with httpx.AsyncClient(timeout=self.config.timeout) as http:
                response = await self._post(http, payload)

        if not response.is_success:
            raise UpstreamError(response.status_code, self._error_details(response))

        try:
            envelope = response.json()
        except ValueError as e:
            raise LLMResponseError(f"Gemini returned a non-JSON body: {e}") from e

        return self.parser.parse_response(envelope)

    async def _post(self, http: httpx.AsyncClient, payload: dict) -> httpx.Response:
        logger.debug(f"Sending image to Gemini model {self.config.model}")
        try:
            return await http.post(
                self.config.generate_url,
                headers=self._get_headers(),
                json=payload,
            )
        except httpx.TimeoutException:
            raise LLMConnectionError("Gemini request timed out")
        except httpx.TransportError as e:
            raise LLMConnectionError(f"Failed to connect to Gemini: {e}")

    @staticmethod
    def _error_details(response: httpx.Response) -> Any:
        """Error body as decoded JSON when possible, else raw text."""
        try:
            return response.json()
        except ValueError:
            return response.text
