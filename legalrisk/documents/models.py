from dataclasses import dataclass

from legalrisk.database.models import AnalysisSummary
from legalrisk.processor.models import Document


@dataclass(frozen=True)
class SimilarDocumentItem:
    """A stored document ranked against another one.

    `similarity` is a whole percentage in [0, 100].
    """

    document: Document
    similarity: int
    analysis: AnalysisSummary | None = None
