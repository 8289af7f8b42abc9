"""Data models for selected files and extracted invoice records."""

from .invoice import ExtractionRecord, InvoiceFields, SelectedFile

__all__ = ["ExtractionRecord", "InvoiceFields", "SelectedFile"]
