from datetime import datetime, timezone

from legalrisk.analysis.models import AnalysisResult, Clause
from legalrisk.embedding.base import BaseEmbeddingClient
from legalrisk.logging.logger import Log
from legalrisk.processor.models import Document
from legalrisk.vectorindex.base import BaseVectorIndex, VectorEntry, sanitize_metadata

DOCUMENT_ENTRY = "document"
CLAUSE_ENTRY = "clause"
_PREVIEW_CHARS = 200


def document_entry_id(document_id: int) -> str:
    return str(document_id)


def clause_entry_id(document_id: int, index: int) -> str:
    return f"{document_id}-clause-{index}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class DocumentIndexer:
    """Writes document- and clause-level embeddings for future retrieval.

    Every method raises on failure; callers decide whether a failure is
    fatal. The pipeline runs them as isolated best-effort tasks.
    """

    def __init__(self, embedding_client: BaseEmbeddingClient, vector_index: BaseVectorIndex) -> None:
        self._embedding_client = embedding_client
        self._vector_index = vector_index

    def store_document(self, document: Document, text: str, document_type: str) -> None:
        vector = self._embedding_client.embed(text)
        preview = text[:_PREVIEW_CHARS] + ("..." if len(text) > _PREVIEW_CHARS else "")
        self._vector_index.upsert(
            document_entry_id(document.id),
            vector,
            {
                "entry_type": DOCUMENT_ENTRY,
                "owner_id": str(document.owner_id),
                "document_id": str(document.id),
                "document_type": document_type,
                "file_name": document.original_filename,
                "created_at": _now_iso(),
                "text_preview": preview,
            },
        )
        Log.info(f"Stored embedding for document {document.id} ({document_type})")

    def store_clauses(self, document: Document, clauses: list[Clause]) -> int:
        entries = []
        for i, clause in enumerate(clauses):
            vector = self._embedding_client.embed(clause.content)
            metadata = sanitize_metadata(
                {
                    "entry_type": CLAUSE_ENTRY,
                    "owner_id": str(document.owner_id),
                    "document_id": str(document.id),
                    "clause_type": clause.type.value,
                    "content": clause.content,
                    "risk_level": clause.risk_level.value,
                    "explanation": clause.explanation,
                    "suggestions": clause.suggestions,
                }
            )
            entries.append(VectorEntry(clause_entry_id(document.id, i), vector, metadata))
        if entries:
            self._vector_index.upsert_many(entries)
            Log.info(f"Stored {len(entries)} clause embeddings for document {document.id}")
        return len(entries)

    def mark_analyzed(self, document_id: int, result: AnalysisResult) -> None:
        self._vector_index.update_metadata(
            document_entry_id(document_id),
            {
                "risk_score": result.risk_score,
                "key_issues": [rf.factor for rf in result.risk_factors],
                "analyzed": True,
                "analysis_date": _now_iso(),
            },
        )
