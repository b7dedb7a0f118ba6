from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass, field

from legalrisk.analysis.models import AnalysisResult
from legalrisk.database.models import AnalysisRecord
from legalrisk.processor.models import Document
from legalrisk.vectorindex.base import VectorMatch


@dataclass(slots=True)
class PipelineContext:
    """State carried through one run. Extracted text lives only here."""

    document_id: int
    document: Document | None = None
    raw_bytes: bytes = b""
    extracted_text: str = ""
    document_type: str = ""
    similar_documents: list[VectorMatch] = field(default_factory=list)
    analysis: AnalysisResult | None = None
    stored_analysis: AnalysisRecord | None = None
    # Document-level upsert still running after its deadline.
    pending_document_entry: Future[None] | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
