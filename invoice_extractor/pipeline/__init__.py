"""Batch pipeline: file selection, orchestration, sanitization and session state."""

from .orchestrator import BatchOrchestrator
from .sanitizer import sanitize_invoice_number
from .selection import FileSelection
from .session import ExtractionSession

__all__ = ["BatchOrchestrator", "ExtractionSession", "FileSelection", "sanitize_invoice_number"]
