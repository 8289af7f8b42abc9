import asyncio
import re

import pytest

from invoice_extractor.llm.errors import NoStructuredResultError, UpstreamError
from invoice_extractor.llm.prompts import get_extraction_prompt
from invoice_extractor.models.invoice import ExtractionRecord, InvoiceFields, SelectedFile
from invoice_extractor.pipeline.errors import NoFilesSelectedError
from invoice_extractor.pipeline.orchestrator import BatchOrchestrator, process_files
from tests.helpers import NA_FIELDS, SAMPLE_FIELDS, FakeExtractionClient, failing_file


def test_empty_batch_raises_and_does_no_work():
    client = FakeExtractionClient({})
    with pytest.raises(NoFilesSelectedError):
        asyncio.run(BatchOrchestrator(client).run([]))
    assert client.calls == []


def test_one_valid_file_and_one_unreadable_file(sample_fields):
    client = FakeExtractionClient({b"image-a": sample_fields})
    files = [SelectedFile.from_bytes("a.jpg", b"image-a"), failing_file("b.jpg")]

    records = asyncio.run(BatchOrchestrator(client).run(files))

    assert records == [
        ExtractionRecord(
            file_name="a.jpg",
            invoice_number="1001",
            company_number="ABN 12 345 678 901",
            date="12/03/2024",
            total_amount="$1,234.50",
        ),
        ExtractionRecord(
            file_name="b.jpg",
            invoice_number="",
            company_number="Error",
            date="Error",
            total_amount="Error",
        ),
    ]


def test_not_available_response_sanitizes_invoice_number():
    client = FakeExtractionClient({b"img": InvoiceFields.from_dict(NA_FIELDS)})
    records = asyncio.run(BatchOrchestrator(client).run([SelectedFile.from_bytes("x.jpg", b"img")]))

    assert records[0].invoice_number == ""
    assert records[0].company_number == "N/A"
    assert records[0].date == "N/A"
    assert records[0].total_amount == "N/A"


def test_upstream_429_only_affects_its_own_file(sample_fields):
    client = FakeExtractionClient({
        b"one": sample_fields,
        b"two": UpstreamError(429, {"error": "rate limited"}),
        b"three": sample_fields,
    })
    files = [SelectedFile.from_bytes(f"{n}.jpg", n.encode()) for n in ("one", "two", "three")]

    records = asyncio.run(BatchOrchestrator(client).run(files))

    assert [r.file_name for r in records] == ["one.jpg", "two.jpg", "three.jpg"]
    assert records[0].company_number == "ABN 12 345 678 901"
    assert records[1] == ExtractionRecord("two.jpg", "", "Error", "Error", "Error")
    assert records[2].company_number == "ABN 12 345 678 901"


def test_unexpected_exception_is_isolated(sample_fields):
    client = FakeExtractionClient({b"a": RuntimeError("boom"), b"b": NoStructuredResultError("none")})
    files = [SelectedFile.from_bytes("a.jpg", b"a"), SelectedFile.from_bytes("b.jpg", b"b")]

    records = asyncio.run(BatchOrchestrator(client).run(files))

    assert all(r.is_error for r in records)


def test_empty_file_is_an_error_record():
    client = FakeExtractionClient({})
    records = asyncio.run(BatchOrchestrator(client).run([SelectedFile.from_bytes("empty.jpg", b"")]))

    assert records == [ExtractionRecord("empty.jpg", "", "Error", "Error", "Error")]
    assert client.calls == []


def test_output_order_follows_input_not_completion():
    fields = {
        bytes([i]): InvoiceFields(invoice_number=f"INV-{i}")
        for i in range(1, 6)
    }
    # Later files finish first
    delays = {bytes([i]): 0.05 * (6 - i) for i in range(1, 6)}
    client = FakeExtractionClient(fields, delays=delays)
    files = [SelectedFile.from_bytes(f"{i}.jpg", bytes([i])) for i in range(1, 6)]

    records = asyncio.run(BatchOrchestrator(client).run(files))

    assert client.completed == [bytes([i]) for i in range(5, 0, -1)]
    assert [r.file_name for r in records] == [f"{i}.jpg" for i in range(1, 6)]
    assert [r.invoice_number for r in records] == [str(i) for i in range(1, 6)]


def test_files_are_processed_concurrently():
    fields = {bytes([i]): InvoiceFields() for i in range(1, 11)}
    delays = {key: 0.2 for key in fields}
    client = FakeExtractionClient(fields, delays=delays)
    files = [SelectedFile.from_bytes(f"{i}.jpg", bytes([i])) for i in range(1, 11)]

    async def run():
        loop = asyncio.get_running_loop()
        start = loop.time()
        records = await BatchOrchestrator(client).run(files)
        return records, loop.time() - start

    records, elapsed = asyncio.run(run())

    assert len(records) == 10
    assert elapsed < 1.0


@pytest.mark.parametrize("count", [1, 3, 10])
def test_record_count_matches_input(count, sample_fields):
    responses = {bytes([i]): sample_fields for i in range(count)}
    responses[bytes([0])] = UpstreamError(500)
    client = FakeExtractionClient(responses)
    files = [SelectedFile.from_bytes(f"{i}.jpg", bytes([i])) for i in range(count)]

    records = asyncio.run(process_files(files, client))

    assert len(records) == count
    assert all(re.fullmatch(r"[0-9]*", r.invoice_number) for r in records)


def test_prompt_is_forwarded(sample_fields):
    client = FakeExtractionClient({b"a": sample_fields})
    asyncio.run(BatchOrchestrator(client).run([SelectedFile.from_bytes("a.jpg", b"a")]))

    assert client.calls == [(b"a", get_extraction_prompt())]


def test_path_backed_files_are_read(tmp_path, sample_fields):
    path = tmp_path / "scan.jpg"
    path.write_bytes(b"scan-bytes")
    client = FakeExtractionClient({b"scan-bytes": sample_fields})

    records = asyncio.run(BatchOrchestrator(client).run([SelectedFile.from_path(path)]))

    assert records[0].file_name == "scan.jpg"
    assert records[0].invoice_number == "1001"


def test_deleted_path_becomes_error_record(tmp_path):
    path = tmp_path / "gone.jpg"
    path.write_bytes(b"data")
    file = SelectedFile.from_path(path)
    path.unlink()

    records = asyncio.run(BatchOrchestrator(FakeExtractionClient({})).run([file]))

    assert records[0].is_error
