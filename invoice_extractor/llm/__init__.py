"""LLM module for invoice field extraction through the Gemini API."""

from .client import BaseExtractionClient, GeminiClient
from .parser import InvoiceParser

__all__ = ["BaseExtractionClient", "GeminiClient", "InvoiceParser"]
