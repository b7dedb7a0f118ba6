class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""


class NoTextExtractedError(ProcessorError):
    """Raised when extraction succeeds but yields only whitespace."""


class PersistenceError(ProcessorError):
    """Raised when the analysis cannot be written. Nothing is left half-written."""


class FileReadError(ProcessorError):
    """Raised when a file cannot be read from storage."""
