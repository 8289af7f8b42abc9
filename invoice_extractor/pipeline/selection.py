"""
Working set of invoice images chosen for the next batch run.

Rules:
- Duplicate suppression by (name, size)
- At most ``max_files`` files selected at once
- An add that would exceed the cap is rejected as a whole
"""

import logging
from typing import Iterable, Iterator

from invoice_extractor.models.invoice import SelectedFile
from invoice_extractor.pipeline.errors import SelectionLimitError, SelectionLockedError

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 10


class FileSelection:
    """Ordered, deduplicated, capped set of SelectedFile."""

    def __init__(self, max_files: int = DEFAULT_MAX_FILES):
        self.max_files = max_files
        self._files: list[SelectedFile] = []
        self.locked = False

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[SelectedFile]:
        return iter(self._files)

    def __bool__(self) -> bool:
        return bool(self._files)

    @property
    def files(self) -> tuple[SelectedFile, ...]:
        """Immutable snapshot of the current selection."""
        return tuple(self._files)

    def add(self, files: Iterable[SelectedFile]) -> list[SelectedFile]:
        """
        Add files to the selection.

        Args:
            files: Candidate files, in the order chosen by the user

        Returns:
            The files actually added (duplicates are skipped)

        Raises:
            SelectionLockedError: If a batch is running
            SelectionLimitError: If the result would exceed ``max_files``;
                the selection is left unchanged
        """
        if self.locked:
            raise SelectionLockedError("Files cannot be added while processing is running.")

        seen = {f.key for f in self._files}
        new_files = []
        for file in files:
            if file.key in seen:
                logger.debug(f"Skipping duplicate file {file.name} ({file.size} bytes)")
                continue
            seen.add(file.key)
            new_files.append(file)

        if len(self._files) + len(new_files) > self.max_files:
            raise SelectionLimitError(
                f"You can select up to {self.max_files} files. "
                f"{len(self._files)} already selected, {len(new_files)} more requested."
            )

        self._files.extend(new_files)
        if new_files:
            logger.info(f"Added {len(new_files)} file(s); {len(self._files)} selected")
        return new_files

    def remove(self, name: str, size: int) -> bool:
        """
        Remove the file identified by (name, size).

        Returns:
            True if a file was removed
        """
        if self.locked:
            raise SelectionLockedError("Files cannot be removed while processing is running.")

        for index, file in enumerate(self._files):
            if file.key == (name, size):
                del self._files[index]
                logger.info(f"Removed {name}; {len(self._files)} selected")
                return True
        return False

    def clear(self) -> None:
        if self.locked:
            raise SelectionLockedError("Files cannot be removed while processing is running.")
        self._files.clear()
