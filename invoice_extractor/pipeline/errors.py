"""Exceptions raised by file selection and batch processing."""


class PipelineError(Exception):
    """Base exception for batch pipeline errors."""
    pass


class SelectionError(PipelineError):
    """The requested change to the file selection was rejected."""
    pass


class SelectionLimitError(SelectionError):
    """Adding the files would exceed the selection cap."""
    pass


class SelectionLockedError(SelectionError):
    """The selection cannot change while a batch is running."""
    pass


class NoFilesSelectedError(PipelineError):
    """Processing was requested with an empty selection."""
    pass


class FileReadError(PipelineError):
    """A selected file could not be read."""
    pass


class BatchProcessingError(PipelineError):
    """Failure outside the per-file isolation boundary."""
    pass
