from legalrisk.extraction.base import BaseExtractorAdapter
from legalrisk.extraction.exceptions import UnsupportedFormatError

PDF_MIME_TYPE = "application/pdf"
WORD_MIME_TYPES = frozenset(
    {
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
SUPPORTED_MIME_TYPES = frozenset({PDF_MIME_TYPE}) | WORD_MIME_TYPES


def is_supported_mime_type(mime_type: str) -> bool:
    return _normalize(mime_type) in SUPPORTED_MIME_TYPES or "word" in _normalize(mime_type)


def _normalize(mime_type: str) -> str:
    return mime_type.split(";", 1)[0].strip().lower()


class TextExtractor:
    """Routes raw bytes to the adapter registered for the declared MIME type."""

    def __init__(self, pdf_adapter: BaseExtractorAdapter, word_adapter: BaseExtractorAdapter) -> None:
        self._pdf_adapter = pdf_adapter
        self._word_adapter = word_adapter

    def extract(self, data: bytes, mime_type: str) -> str:
        """Extract plain text.

        Raises:
            UnsupportedFormatError: if the MIME type is neither PDF nor Word.
            ExtractionFailedError: if the adapter cannot parse the bytes.
        """
        return self._adapter_for(mime_type).extract(data)

    def _adapter_for(self, mime_type: str) -> BaseExtractorAdapter:
        normalized = _normalize(mime_type)
        if normalized == PDF_MIME_TYPE:
            return self._pdf_adapter
        if normalized in WORD_MIME_TYPES or "word" in normalized:
            return self._word_adapter
        raise UnsupportedFormatError(f"Unsupported MIME type '{mime_type}'")
