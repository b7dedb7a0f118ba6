from abc import ABC, abstractmethod


class BaseExtractorAdapter(ABC):
    """Contract for all format-specific text extraction adapters."""

    @abstractmethod
    def extract(self, data: bytes) -> str:
        """Extract plain text from raw file bytes.

        Args:
            data: Raw file content.

        Returns:
            Extracted text as a single stripped string. May be empty.

        Raises:
            ExtractionFailedError: if the parser cannot read the file.
        """
