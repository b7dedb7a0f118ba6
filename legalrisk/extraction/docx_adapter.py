import io

import docx

from legalrisk.extraction.base import BaseExtractorAdapter
from legalrisk.extraction.exceptions import ExtractionFailedError


class DocxAdapter(BaseExtractorAdapter):
    """Extracts text from Word documents using python-docx.

    Paragraph text comes first, then table cells row by row. Legacy binary
    .doc files are not OOXML and fail here with ExtractionFailedError.
    """

    def extract(self, data: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(data))
            lines = [p.text for p in document.paragraphs if p.text.strip()]
            for table in document.tables:
                for row in table.rows:
                    cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                    if cells:
                        lines.append(" | ".join(cells))
        except Exception as exc:
            raise ExtractionFailedError(f"python-docx extraction failed: {exc}") from exc
        return "\n".join(lines).strip()
