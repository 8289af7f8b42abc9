"""
Invoice Batch Extractor - AI-powered invoice field extraction.

This package provides functionality for:
- Batch upload of invoice images (up to 10 at a time)
- Field extraction through the Gemini multimodal API
- Excel export of the extracted records
"""

__version__ = "0.1.0"
__author__ = "Invoice Batch Extractor"
