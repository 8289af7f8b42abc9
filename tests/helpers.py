"""Test doubles and sample payloads shared across the test suite."""

import asyncio
import base64
import json

from invoice_extractor.llm.client import BaseExtractionClient
from invoice_extractor.models.invoice import SelectedFile

TEST_BASE_URL = "https://gemini.test/v1beta"
TEST_MODEL = "test-model"
TEST_GENERATE_URL = f"{TEST_BASE_URL}/models/{TEST_MODEL}:generateContent"

SAMPLE_FIELDS = {
    "invoiceNumber": "INV-1001",
    "companyNumber": "ABN 12 345 678 901",
    "totalAmount": "$1,234.50",
    "date": "12/03/2024",
}

NA_FIELDS = {
    "invoiceNumber": "N/A",
    "companyNumber": "N/A",
    "totalAmount": "N/A",
    "date": "N/A",
}


class FakeExtractionClient(BaseExtractionClient):
    """
    Extraction gateway keyed by the decoded image bytes.

    A response may be an InvoiceFields or an exception to raise. ``delays``
    lets a test control completion order.
    """

    def __init__(self, responses, delays=None, on_call=None):
        self.responses = responses
        self.delays = delays or {}
        self.on_call = on_call
        self.calls = []
        self.completed = []

    def get_provider_name(self) -> str:
        return "Fake"

    async def extract_fields(self, image_base64, prompt=None):
        data = base64.b64decode(image_base64)
        self.calls.append((data, prompt))
        if self.on_call:
            self.on_call()
        await asyncio.sleep(self.delays.get(data, 0))
        self.completed.append(data)
        result = self.responses[data]
        if isinstance(result, Exception):
            raise result
        return result


def gemini_envelope(fields: dict) -> dict:
    """A generateContent response carrying ``fields`` as the JSON text."""
    return {
        "candidates": [{
            "content": {
                "parts": [{"text": json.dumps(fields)}],
                "role": "model",
            },
            "finishReason": "STOP",
        }],
    }


def failing_file(name: str, size: int = 10) -> SelectedFile:
    """A selected file whose read raises OSError."""
    def reader():
        raise OSError("read failed")
    return SelectedFile(name=name, size=size, reader=reader)
