"""
Batch orchestration for invoice extraction.

Fans a file set out into one coroutine per file, joins them in input order,
and sanitizes the result. Each file is isolated: a read or extraction failure
turns into an all-"Error" record for that file and never reaches its siblings.
"""

import asyncio
import base64
import logging
import time
from dataclasses import replace
from typing import Optional, Sequence

from invoice_extractor.llm.client import BaseExtractionClient
from invoice_extractor.llm.prompts import get_extraction_prompt
from invoice_extractor.models.invoice import ExtractionRecord, SelectedFile
from invoice_extractor.pipeline.errors import (
    BatchProcessingError,
    FileReadError,
    NoFilesSelectedError,
)
from invoice_extractor.pipeline.sanitizer import sanitize_invoice_number

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """
    Runs one extraction batch.

    Output order always matches input order: every coroutine writes to the
    slot of the file it was started for, regardless of completion order.
    """

    def __init__(self, client: BaseExtractionClient, prompt: Optional[str] = None):
        """
        Initialize the orchestrator.

        Args:
            client: Extraction gateway used for every file
            prompt: Extraction prompt (defaults to the invoice prompt)
        """
        self.client = client
        self.prompt = prompt or get_extraction_prompt()

    async def run(self, files: Sequence[SelectedFile]) -> list[ExtractionRecord]:
        """
        Extract every file in the batch.

        Args:
            files: Files to process, in display order

        Returns:
            One sanitized record per input file, in input order

        Raises:
            NoFilesSelectedError: If ``files`` is empty
            BatchProcessingError: If the join step itself fails
        """
        files = list(files)
        if not files:
            raise NoFilesSelectedError("No files selected.")

        logger.info(f"Processing batch of {len(files)} file(s) with {self.client.get_provider_name()}")
        start = time.monotonic()

        try:
            records = await asyncio.gather(*(self._process_file(f) for f in files))
            sanitized = [
                replace(r, invoice_number=sanitize_invoice_number(r.invoice_number))
                for r in records
            ]
        except Exception as e:
            logger.exception("Batch processing failed")
            raise BatchProcessingError(str(e)) from e

        failed = sum(1 for r in sanitized if r.is_error)
        logger.info(
            f"Batch finished in {time.monotonic() - start:.2f}s: "
            f"{len(sanitized) - failed} succeeded, {failed} failed"
        )
        return sanitized

    async def _process_file(self, file: SelectedFile) -> ExtractionRecord:
        """Read, encode and extract one file. Never raises."""
        try:
            data = await self._read(file)
        except (FileReadError, OSError) as e:
            logger.warning(f"Could not read {file.name}: {e}")
            return ExtractionRecord.error(file.name)

        image_base64 = base64.b64encode(data).decode("ascii")

        try:
            fields = await self.client.extract_fields(image_base64, self.prompt)
        except Exception as e:
            logger.warning(f"Error processing {file.name}: {e}")
            return ExtractionRecord.error(file.name)

        logger.debug(f"Extracted {file.name}: {fields}")
        return ExtractionRecord.from_fields(file.name, fields)

    async def _read(self, file: SelectedFile) -> bytes:
        """Read a file's bytes; path-backed files are read off the event loop."""
        try:
            if file.path is not None:
                data = await asyncio.to_thread(file.read)
            else:
                data = file.read()
        except OSError:
            raise
        except Exception as e:
            raise FileReadError(str(e)) from e

        if not data:
            raise FileReadError("file is empty")
        return data


async def process_files(
    files: Sequence[SelectedFile],
    client: BaseExtractionClient,
) -> list[ExtractionRecord]:
    """
    Convenience function to run a single batch.

    Args:
        files: Files to process
        client: Extraction gateway

    Returns:
        Sanitized records in input order
    """
    orchestrator = BatchOrchestrator(client)
    return await orchestrator.run(files)
