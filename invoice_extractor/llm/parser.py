"""
Gemini response parser for invoice extraction.

Handles:
- Locating the structured text in the generateContent envelope
- JSON decoding of that text
- Normalizing the four fields (missing -> N/A, scalars -> str)
"""

import json
import logging
from typing import Any

from invoice_extractor.llm.errors import InvalidResponseError, NoStructuredResultError
from invoice_extractor.models.invoice import FIELD_NAMES, NOT_AVAILABLE, InvoiceFields

logger = logging.getLogger(__name__)


class InvoiceParser:
    """
    Parses generateContent responses into InvoiceFields.

    The expected path is ``candidates[0].content.parts[0].text``; anything
    else is reported as a named error rather than an empty result.
    """

    def parse_response(self, envelope: Any) -> InvoiceFields:
        """
        Parse a decoded generateContent response.

        Args:
            envelope: Decoded JSON body of the upstream response

        Returns:
            InvoiceFields with all four fields populated

        Raises:
            NoStructuredResultError: If the candidate text is absent
            InvalidResponseError: If the text is not a JSON object
        """
        text = self.extract_candidate_text(envelope)
        return self.parse_fields(text)

    def extract_candidate_text(self, envelope: Any) -> str:
        """Return the first candidate's first text part."""
        try:
            text = envelope["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None

        if not isinstance(text, str) or not text:
            raise NoStructuredResultError("No structured result from model")
        return text

    def parse_fields(self, text: str) -> InvoiceFields:
        """Decode the model's JSON text into InvoiceFields."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidResponseError(f"Model returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise InvalidResponseError(
                f"Model returned {type(data).__name__}, expected a JSON object"
            )

        missing = [name for name in FIELD_NAMES if data.get(name) is None]
        if missing:
            logger.debug(f"Fields missing from model output: {', '.join(missing)}")

        return InvoiceFields.from_dict(
            {name: self._normalize(data.get(name)) for name in FIELD_NAMES}
        )

    def _normalize(self, value: Any) -> str:
        if value is None:
            return NOT_AVAILABLE
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)):
            return str(value)
        raise InvalidResponseError(f"Unexpected field value: {value!r}")


def parse_gemini_response(envelope: Any) -> InvoiceFields:
    """
    Convenience function to parse a generateContent response.

    Args:
        envelope: Decoded upstream response

    Returns:
        Parsed InvoiceFields
    """
    parser = InvoiceParser()
    return parser.parse_response(envelope)
