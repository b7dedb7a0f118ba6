from datetime import datetime
from unittest.mock import MagicMock

import pytest

from legalrisk.analysis.models import (
    AnalysisResult,
    Clause,
    ClauseType,
    RiskFactor,
    Severity,
)
from legalrisk.embedding.example_client_adapter import ExampleEmbeddingClient
from legalrisk.embedding.exceptions import EmbeddingUnavailableError
from legalrisk.processor.models import Document
from legalrisk.retrieval.indexer import (
    CLAUSE_ENTRY,
    DOCUMENT_ENTRY,
    DocumentIndexer,
    clause_entry_id,
    document_entry_id,
)
from legalrisk.retrieval.retriever import ContextRetriever
from legalrisk.vectorindex.exceptions import VectorIndexError
from legalrisk.vectorindex.memory_index import InMemoryVectorIndex

NDA_TEXT = "mutual non-disclosure agreement covering confidential information"


def _make_document(id: int = 1, owner_id: int = 10, name: str = "nda.pdf") -> Document:
    return Document(
        id=id,
        owner_id=owner_id,
        original_filename=name,
        storage_filename=f"{id}.pdf",
        mime_type="application/pdf",
        size_bytes=100,
        created_at=datetime(2025, 1, 1),
    )


def _make_clause(content: str = "Either party may terminate.") -> Clause:
    return Clause(
        type=ClauseType.TERMINATION,
        content=content,
        risk_level=Severity.HIGH,
        explanation="No notice period.",
        suggestions=["Add 30 days notice"],
    )


def _make_stack() -> tuple[DocumentIndexer, ContextRetriever, InMemoryVectorIndex]:
    embedding = ExampleEmbeddingClient(dimensions=64, max_chars=8000)
    index = InMemoryVectorIndex()
    return DocumentIndexer(embedding, index), ContextRetriever(embedding, index), index


class TestEntryIds:
    def test_document_entry_id(self) -> None:
        assert document_entry_id(42) == "42"

    def test_clause_entry_id(self) -> None:
        assert clause_entry_id(42, 3) == "42-clause-3"


class TestDocumentIndexer:
    def test_store_document_writes_metadata(self) -> None:
        indexer, _retriever, index = _make_stack()

        indexer.store_document(_make_document(), "x" * 250, "NDA")

        entry = index.get("1")
        assert entry is not None
        assert entry.metadata["entry_type"] == DOCUMENT_ENTRY
        assert entry.metadata["owner_id"] == "10"
        assert entry.metadata["document_id"] == "1"
        assert entry.metadata["document_type"] == "NDA"
        assert entry.metadata["file_name"] == "nda.pdf"
        assert entry.metadata["text_preview"] == "x" * 200 + "..."
        assert "created_at" in entry.metadata

    def test_store_clauses_writes_one_entry_per_clause(self) -> None:
        indexer, _retriever, index = _make_stack()

        count = indexer.store_clauses(
            _make_document(), [_make_clause("first"), _make_clause("second")]
        )

        assert count == 2
        entry = index.get("1-clause-1")
        assert entry is not None
        assert entry.metadata["entry_type"] == CLAUSE_ENTRY
        assert entry.metadata["clause_type"] == "TERMINATION"
        assert entry.metadata["risk_level"] == "HIGH"
        assert entry.metadata["content"] == "second"
        assert entry.metadata["suggestions"] == ["Add 30 days notice"]

    def test_store_no_clauses_is_noop(self) -> None:
        vector_index = MagicMock()
        indexer = DocumentIndexer(MagicMock(), vector_index)

        assert indexer.store_clauses(_make_document(), []) == 0
        vector_index.upsert_many.assert_not_called()

    def test_mark_analyzed_merges_metadata(self) -> None:
        indexer, _retriever, index = _make_stack()
        indexer.store_document(_make_document(), NDA_TEXT, "NDA")
        result = AnalysisResult(
            risk_score=64,
            overall_summary="s",
            plain_english="p",
            risk_factors=[RiskFactor("Perpetual term", Severity.HIGH, "e")],
        )

        indexer.mark_analyzed(1, result)

        entry = index.get("1")
        assert entry is not None
        assert entry.metadata["risk_score"] == 64
        assert entry.metadata["key_issues"] == ["Perpetual term"]
        assert entry.metadata["analyzed"] is True
        assert entry.metadata["file_name"] == "nda.pdf"

    def test_embedding_failure_propagates(self) -> None:
        embedding = MagicMock()
        embedding.embed.side_effect = EmbeddingUnavailableError("down")
        indexer = DocumentIndexer(embedding, InMemoryVectorIndex())

        with pytest.raises(EmbeddingUnavailableError):
            indexer.store_document(_make_document(), NDA_TEXT, "NDA")


class TestContextRetriever:
    def test_finds_owner_documents_only(self) -> None:
        indexer, retriever, _index = _make_stack()
        indexer.store_document(_make_document(1, owner_id=10), NDA_TEXT, "NDA")
        indexer.store_document(_make_document(2, owner_id=99), NDA_TEXT, "NDA")

        matches = retriever.find_similar(NDA_TEXT, owner_id=10, top_k=3)

        assert [m.id for m in matches] == ["1"]
        assert matches[0].similarity == pytest.approx(1.0)
        assert matches[0].metadata["file_name"] == "nda.pdf"

    def test_excludes_current_document(self) -> None:
        indexer, retriever, _index = _make_stack()
        indexer.store_document(_make_document(1), NDA_TEXT, "NDA")
        indexer.store_document(_make_document(2), NDA_TEXT + " annex", "NDA")

        matches = retriever.find_similar(NDA_TEXT, owner_id=10, top_k=1, exclude_id=1)

        assert [m.id for m in matches] == ["2"]

    def test_ignores_clause_entries(self) -> None:
        indexer, retriever, _index = _make_stack()
        indexer.store_clauses(_make_document(1), [_make_clause(NDA_TEXT)])

        assert retriever.find_similar(NDA_TEXT, owner_id=10, top_k=3) == []

    def test_first_document_for_owner_returns_empty(self) -> None:
        _indexer, retriever, _index = _make_stack()
        assert retriever.find_similar(NDA_TEXT, owner_id=10, top_k=3) == []

    def test_results_never_exceed_top_k(self) -> None:
        indexer, retriever, _index = _make_stack()
        for i in range(1, 6):
            indexer.store_document(_make_document(i), f"{NDA_TEXT} {i}", "NDA")

        assert len(retriever.find_similar(NDA_TEXT, owner_id=10, top_k=3)) == 3

    def test_embedding_failure_returns_empty(self) -> None:
        embedding = MagicMock()
        embedding.embed.side_effect = EmbeddingUnavailableError("down")
        retriever = ContextRetriever(embedding, InMemoryVectorIndex())

        assert retriever.find_similar(NDA_TEXT, owner_id=10, top_k=3) == []

    def test_index_failure_returns_empty(self) -> None:
        vector_index = MagicMock()
        vector_index.query.side_effect = VectorIndexError("503")
        retriever = ContextRetriever(ExampleEmbeddingClient(dimensions=8, max_chars=100), vector_index)

        assert retriever.find_similar(NDA_TEXT, owner_id=10, top_k=3) == []

    def test_zero_top_k_skips_query(self) -> None:
        embedding = MagicMock()
        retriever = ContextRetriever(embedding, InMemoryVectorIndex())

        assert retriever.find_similar(NDA_TEXT, owner_id=10, top_k=0) == []
        embedding.embed.assert_not_called()

    def test_find_similar_clauses_filters_by_type(self) -> None:
        indexer, retriever, _index = _make_stack()
        indexer.store_clauses(_make_document(1), [_make_clause("terminate at will")])

        hits = retriever.find_similar_clauses("terminate at will", "TERMINATION", owner_id=10)
        misses = retriever.find_similar_clauses("terminate at will", "PAYMENT", owner_id=10)

        assert [m.id for m in hits] == ["1-clause-0"]
        assert misses == []
