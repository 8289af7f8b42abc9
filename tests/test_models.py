from invoice_extractor.models.invoice import (
    ERROR_VALUE,
    NOT_AVAILABLE,
    ExtractionRecord,
    InvoiceFields,
    SelectedFile,
)
from tests.helpers import SAMPLE_FIELDS


def test_selected_file_from_path(tmp_path):
    path = tmp_path / "scan.jpg"
    path.write_bytes(b"\xff\xd8jpegdata")

    file = SelectedFile.from_path(path)
    assert file.name == "scan.jpg"
    assert file.size == 10
    assert file.key == ("scan.jpg", 10)
    assert file.read() == b"\xff\xd8jpegdata"
    assert file.path == path


def test_selected_file_equality_ignores_reader():
    a = SelectedFile.from_bytes("a.jpg", b"abc")
    b = SelectedFile.from_bytes("a.jpg", b"xyz")
    assert a == b


def test_invoice_fields_defaults_to_not_available():
    fields = InvoiceFields.from_dict({"invoiceNumber": "7"})
    assert fields.invoice_number == "7"
    assert fields.company_number == NOT_AVAILABLE
    assert fields.date == NOT_AVAILABLE
    assert fields.total_amount == NOT_AVAILABLE


def test_invoice_fields_round_trip_keys():
    assert InvoiceFields.from_dict(SAMPLE_FIELDS).to_dict() == SAMPLE_FIELDS


def test_error_record():
    record = ExtractionRecord.error("b.jpg")
    assert record.file_name == "b.jpg"
    assert {record.invoice_number, record.company_number, record.date, record.total_amount} == {ERROR_VALUE}
    assert record.is_error


def test_excel_row_column_order():
    record = ExtractionRecord.from_fields("a.jpg", InvoiceFields.from_dict(SAMPLE_FIELDS))
    assert list(record.to_excel_row()) == [
        "Invoice Number", "Company Number", "Date", "Total Amount", "Source File",
    ]
    assert record.to_excel_row()["Source File"] == "a.jpg"


def test_display_row_shows_empty_as_not_available():
    record = ExtractionRecord("a.jpg", "", "N/A", "", "$5")
    row = record.to_display_row()
    assert row["Invoice Number"] == NOT_AVAILABLE
    assert row["Date"] == NOT_AVAILABLE
    assert row["Total Amount"] == "$5"
