"""
In-memory extraction session.

Holds the file selection, the latest result set, the busy flag and the
inline error message shown to the user. Every action clears the previous
error before it starts.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from invoice_extractor.config import AppConfig, get_config
from invoice_extractor.export.excel import ExcelExporter, ExporterNotReadyError, ExportError
from invoice_extractor.llm.client import BaseExtractionClient, GeminiClient
from invoice_extractor.models.invoice import ExtractionRecord, SelectedFile
from invoice_extractor.pipeline.errors import NoFilesSelectedError, SelectionError
from invoice_extractor.pipeline.orchestrator import BatchOrchestrator
from invoice_extractor.pipeline.selection import FileSelection

logger = logging.getLogger(__name__)

CRITICAL_ERROR_MESSAGE = "A critical error occurred while processing files. Please check the logs."
EXPORTER_LOADING_MESSAGE = "Excel library is still loading. Please try again in a moment."


class ExtractionSession:
    """State for one user's extraction workflow."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client: Optional[BaseExtractionClient] = None,
        exporter: Optional[ExcelExporter] = None,
    ):
        """
        Initialize the session.

        Args:
            config: Application configuration
            client: Extraction gateway; a GeminiClient is opened per run if omitted
            exporter: Excel exporter; created immediately if omitted

        ``download`` holds the workbook bytes for the latest result set.
        """
        self.config = config or get_config()
        self.client = client
        self.selection = FileSelection(max_files=self.config.max_files)
        self.exporter = exporter if exporter is not None else ExcelExporter(self.config.export_sheet_name)
        self.records: list[ExtractionRecord] = []
        self.busy = False
        self.error: Optional[str] = None
        self.download: Optional[bytes] = None

    @property
    def files(self) -> tuple[SelectedFile, ...]:
        return self.selection.files

    def add_files(self, files: Iterable[SelectedFile]) -> list[SelectedFile]:
        """Add files to the selection; a rejected add leaves it unchanged."""
        self.error = None
        try:
            return self.selection.add(files)
        except SelectionError as e:
            logger.info(f"Selection rejected: {e}")
            self.error = str(e)
            return []

    def remove_file(self, name: str, size: int) -> bool:
        self.error = None
        try:
            return self.selection.remove(name, size)
        except SelectionError as e:
            self.error = str(e)
            return False

    def clear_files(self) -> None:
        self.error = None
        try:
            self.selection.clear()
        except SelectionError as e:
            self.error = str(e)

    async def process(self) -> list[ExtractionRecord]:
        """
        Run a batch over the current selection.

        The previous result set is replaced wholesale. On a batch-level
        failure the result set is left empty and ``error`` is set.
        """
        if not self.selection:
            self.error = str(NoFilesSelectedError("No files selected."))
            return self.records

        self.error = None
        self.records = []
        self.download = None
        self.busy = True
        self.selection.locked = True
        snapshot = self.selection.files

        try:
            if self.client is not None:
                records = await BatchOrchestrator(self.client).run(snapshot)
            else:
                async with GeminiClient(self.config.gemini) as client:
                    records = await BatchOrchestrator(client).run(snapshot)
            self.records = records
        except Exception:
            logger.exception("An error occurred during batch processing")
            self.error = CRITICAL_ERROR_MESSAGE
            self.records = []
        finally:
            self.busy = False
            self.selection.locked = False

        # Download bytes are built once per run
        if self.records:
            self.download = self.export_bytes()

        return self.records

    def _check_exporter(self) -> ExcelExporter:
        if self.exporter is None or not self.exporter.ready:
            raise ExporterNotReadyError(EXPORTER_LOADING_MESSAGE)
        return self.exporter

    def export(self, file_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Write the result set to disk; returns None and sets ``error`` on failure."""
        self.error = None
        try:
            exporter = self._check_exporter()
            return exporter.export(self.records, file_path or self.config.export_file_name)
        except ExportError as e:
            self.error = str(e)
            return None

    def export_bytes(self) -> Optional[bytes]:
        """Serialize the result set for download; returns None and sets ``error`` on failure."""
        self.error = None
        try:
            return self._check_exporter().to_bytes(self.records)
        except ExportError as e:
            self.error = str(e)
            return None
