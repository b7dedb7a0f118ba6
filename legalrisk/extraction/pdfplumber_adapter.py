import io

import pdfplumber

from legalrisk.extraction.base import BaseExtractorAdapter
from legalrisk.extraction.exceptions import ExtractionFailedError


class PdfPlumberAdapter(BaseExtractorAdapter):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, data: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise ExtractionFailedError(f"pdfplumber extraction failed: {exc}") from exc
