class ExtractionError(Exception):
    """Base exception for text extraction."""


class UnsupportedFormatError(ExtractionError):
    """Raised when no extractor handles the declared MIME type."""


class ExtractionFailedError(ExtractionError):
    """Raised when a parser cannot read the file (corrupt or wrong format)."""
