"""Export module for writing extracted records to Excel spreadsheets."""

from .excel import ExcelExporter, ExportError, ExporterNotReadyError, NoDataToExportError

__all__ = ["ExcelExporter", "ExportError", "ExporterNotReadyError", "NoDataToExportError"]
