"""
Excel export module for extracted invoice records.

Handles:
- One row per record, five fixed columns
- Source File column sized to the longest file name
- Writing to disk or to an in-memory buffer for download
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from invoice_extractor.models.invoice import ExtractionRecord

logger = logging.getLogger(__name__)


DEFAULT_FILE_NAME = "InvoiceData.xlsx"
DEFAULT_SHEET_NAME = "Invoices"


class ExportError(Exception):
    """Base exception for export errors."""
    pass


class NoDataToExportError(ExportError):
    """The result set is empty."""
    pass


class ExporterNotReadyError(ExportError):
    """The spreadsheet writer has not finished initializing."""
    pass


class ExcelExporter:
    """
    Exports extraction records to Excel files.

    Features:
    - Fixed column order: Invoice Number, Company Number, Date,
      Total Amount, Source File
    - Single sheet, bold header row, frozen header
    - Source File width follows the longest file name (minimum 10)
    """

    # Column headers for the export
    HEADERS = [
        "Invoice Number",
        "Company Number",
        "Date",
        "Total Amount",
        "Source File",
    ]

    # Column widths; the Source File width is computed per export
    COLUMN_WIDTHS = [20, 20, 15, 15]
    MIN_SOURCE_FILE_WIDTH = 10

    def __init__(self, sheet_name: str = DEFAULT_SHEET_NAME):
        """
        Initialize the Excel exporter.

        ``ready`` stays False if the workbook styles cannot be built; every
        export then fails with ExporterNotReadyError instead of writing a
        half-formatted file.
        """
        self.sheet_name = sheet_name
        self.ready = False
        try:
            self._setup_styles()
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to initialize Excel styles: {e}")
        else:
            self.ready = True

    def _setup_styles(self):
        """Set up Excel styles for formatting."""
        # Header style
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center")

        # Border style
        thin_border = Side(style="thin", color="CCCCCC")
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border,
        )

    def to_rows(self, records: Sequence[ExtractionRecord]) -> list[dict]:
        """Convert records to ordered row dicts keyed by column header."""
        return [record.to_excel_row() for record in records]

    def source_file_width(self, rows: Sequence[dict]) -> int:
        """Width of the Source File column."""
        longest = max((len(row["Source File"] or "") for row in rows), default=0)
        return max(longest, self.MIN_SOURCE_FILE_WIDTH)

    def build_workbook(self, records: Sequence[ExtractionRecord]) -> Workbook:
        """
        Build the export workbook.

        Raises:
            ExporterNotReadyError: If styles have not been initialized
            NoDataToExportError: If there are no records
        """
        if not self.ready:
            raise ExporterNotReadyError(
                "Excel library is still loading. Please try again in a moment."
            )
        if not records:
            raise NoDataToExportError("No data to export.")

        rows = self.to_rows(records)

        wb = Workbook()
        ws = wb.active
        ws.title = self.sheet_name
        self._write_headers(ws)

        for row_num, row_data in enumerate(rows, start=2):
            for col, header in enumerate(self.HEADERS, start=1):
                value = self._cell_value(row_data[header])
                cell = ws.cell(row=row_num, column=col, value=value)
                # Extracted text is stored verbatim, never as a formula
                if isinstance(value, str):
                    cell.data_type = "s"
                cell.border = self.cell_border

        widths = self.COLUMN_WIDTHS + [self.source_file_width(rows)]
        for col, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width

        return wb

    def export(
        self,
        records: Sequence[ExtractionRecord],
        file_path: Optional[Union[str, Path]] = None,
    ) -> Path:
        """
        Export records to an Excel file.

        Args:
            records: Batch result set
            file_path: Output path (defaults to InvoiceData.xlsx in the
                working directory)

        Returns:
            Path to the exported file
        """
        file_path = Path(file_path) if file_path else Path(DEFAULT_FILE_NAME)

        if file_path.is_dir():
            file_path = file_path / DEFAULT_FILE_NAME

        # Ensure .xlsx extension
        if file_path.suffix.lower() != ".xlsx":
            if file_path.suffix:
                logger.warning(f"Replacing extension of {file_path.name} with .xlsx")
            file_path = file_path.with_suffix(".xlsx")

        wb = self.build_workbook(records)
        wb.save(file_path)
        logger.info(f"Exported {len(records)} rows to {file_path}")

        return file_path

    def to_bytes(self, records: Sequence[ExtractionRecord]) -> bytes:
        """Serialize the export workbook in memory."""
        wb = self.build_workbook(records)
        buffer = BytesIO()
        wb.save(buffer)
        logger.info(f"Serialized {len(records)} rows for download")
        return buffer.getvalue()

    @staticmethod
    def _cell_value(value):
        """Drop control characters that worksheets cannot hold."""
        if isinstance(value, str):
            return ILLEGAL_CHARACTERS_RE.sub("", value)
        return value

    def _write_headers(self, ws):
        """Write header row with formatting."""
        for col, header in enumerate(self.HEADERS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_alignment
            cell.border = self.cell_border

        # Freeze header row
        ws.freeze_panes = "A2"


def export_records(
    records: Sequence[ExtractionRecord],
    file_path: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Convenience function to export a result set.

    Args:
        records: Extraction records
        file_path: Path to Excel file

    Returns:
        Path to exported file
    """
    exporter = ExcelExporter()
    return exporter.export(records, file_path)
