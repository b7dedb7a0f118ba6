from legalrisk.config.settings import Settings
from legalrisk.extraction.base import BaseExtractorAdapter
from legalrisk.extraction.docx_adapter import DocxAdapter
from legalrisk.extraction.pdfplumber_adapter import PdfPlumberAdapter
from legalrisk.extraction.pymupdf_adapter import PyMuPdfAdapter
from legalrisk.extraction.text_extractor import TextExtractor


class TextExtractorFactory:
    """Creates the text extractor with the configured PDF engine."""

    PDF_ADAPTERS: dict[str, type[BaseExtractorAdapter]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> TextExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return TextExtractor(pdf_adapter=adapter_cls(), word_adapter=DocxAdapter())
