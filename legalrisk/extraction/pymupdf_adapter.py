import pymupdf

from legalrisk.extraction.base import BaseExtractorAdapter
from legalrisk.extraction.exceptions import ExtractionFailedError


class PyMuPdfAdapter(BaseExtractorAdapter):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, data: bytes) -> str:
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise ExtractionFailedError(f"pymupdf extraction failed: {exc}") from exc
