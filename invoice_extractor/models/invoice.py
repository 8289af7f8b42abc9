"""
Data models for batch invoice extraction.

Defines:
- SelectedFile: a user-supplied invoice image, identified by (name, size)
- InvoiceFields: the four fields returned by the extraction model
- ExtractionRecord: one row of the batch result set
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Union

# Field could not be determined from the invoice
NOT_AVAILABLE = "N/A"

# Processing failed outright for the file
ERROR_VALUE = "Error"

# Wire names used by the model response schema, in prompt order
FIELD_NAMES = ("invoiceNumber", "companyNumber", "totalAmount", "date")


@dataclass(frozen=True)
class SelectedFile:
    """
    An invoice image chosen by the user.

    The bytes are not held on the object directly: ``reader`` returns them on
    demand so that path-backed files are only read when a batch runs.
    """
    name: str
    size: int
    reader: Callable[[], bytes] = field(repr=False, compare=False)
    path: Optional[Path] = field(default=None, compare=False)

    @property
    def key(self) -> tuple[str, int]:
        """Identity used for duplicate suppression."""
        return (self.name, self.size)

    def read(self) -> bytes:
        """Return the raw file content."""
        return self.reader()

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "SelectedFile":
        """Wrap an in-memory payload."""
        return cls(name=name, size=len(data), reader=lambda: data)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SelectedFile":
        """Wrap a file on disk. The size is taken from the filesystem."""
        path = Path(path)
        return cls(
            name=path.name,
            size=path.stat().st_size,
            reader=path.read_bytes,
            path=path,
        )

    @classmethod
    def from_upload(cls, uploaded_file: Any) -> "SelectedFile":
        """Wrap a Streamlit ``UploadedFile``."""
        return cls(
            name=uploaded_file.name,
            size=uploaded_file.size,
            reader=uploaded_file.getvalue,
        )


@dataclass(frozen=True)
class InvoiceFields:
    """Fields extracted by the model for a single invoice image."""
    invoice_number: str = NOT_AVAILABLE
    company_number: str = NOT_AVAILABLE
    date: str = NOT_AVAILABLE
    total_amount: str = NOT_AVAILABLE

    @classmethod
    def from_dict(cls, data: dict) -> "InvoiceFields":
        """Build from the camelCase keys used by the response schema."""
        return cls(
            invoice_number=data.get("invoiceNumber", NOT_AVAILABLE),
            company_number=data.get("companyNumber", NOT_AVAILABLE),
            date=data.get("date", NOT_AVAILABLE),
            total_amount=data.get("totalAmount", NOT_AVAILABLE),
        )

    def to_dict(self) -> dict:
        return {
            "invoiceNumber": self.invoice_number,
            "companyNumber": self.company_number,
            "totalAmount": self.total_amount,
            "date": self.date,
        }


@dataclass(frozen=True)
class ExtractionRecord:
    """One row of the batch result set."""
    file_name: str
    invoice_number: str
    company_number: str
    date: str
    total_amount: str

    @classmethod
    def from_fields(cls, file_name: str, fields: InvoiceFields) -> "ExtractionRecord":
        return cls(
            file_name=file_name,
            invoice_number=fields.invoice_number,
            company_number=fields.company_number,
            date=fields.date,
            total_amount=fields.total_amount,
        )

    @classmethod
    def error(cls, file_name: str) -> "ExtractionRecord":
        """Record for a file whose processing failed."""
        return cls(
            file_name=file_name,
            invoice_number=ERROR_VALUE,
            company_number=ERROR_VALUE,
            date=ERROR_VALUE,
            total_amount=ERROR_VALUE,
        )

    @property
    def is_error(self) -> bool:
        return (
            self.company_number == ERROR_VALUE
            and self.date == ERROR_VALUE
            and self.total_amount == ERROR_VALUE
        )

    def to_excel_row(self) -> dict:
        """
        Convert to a spreadsheet row.

        Keys are the column headers, in export order.
        """
        return {
            "Invoice Number": self.invoice_number,
            "Company Number": self.company_number,
            "Date": self.date,
            "Total Amount": self.total_amount,
            "Source File": self.file_name,
        }

    def to_display_row(self) -> dict:
        """Row for the results table; empty values are shown as N/A."""
        return {
            "Invoice": self.file_name or NOT_AVAILABLE,
            "Invoice Number": self.invoice_number or NOT_AVAILABLE,
            "Company Number": self.company_number or NOT_AVAILABLE,
            "Date": self.date or NOT_AVAILABLE,
            "Total Amount": self.total_amount or NOT_AVAILABLE,
        }
