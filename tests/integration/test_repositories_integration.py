import pytest

from legalrisk.analysis.fallback import fallback_analysis
from legalrisk.analysis.models import (
    AnalysisResult,
    Clause,
    ClausePosition,
    ClauseType,
    Severity,
)
from legalrisk.database.repositories.analysis_repository import AnalysisRepository
from legalrisk.database.repositories.document_repository import DocumentRepository
from legalrisk.processor.exceptions import PersistenceError
from legalrisk.processor.models import Document, DocumentStatus


@pytest.mark.integration
class TestDocumentTransitions:
    def test_claim_is_exclusive(self, seed_document: Document) -> None:
        repo = DocumentRepository()

        assert repo.claim_for_processing(seed_document.id) is True
        assert repo.claim_for_processing(seed_document.id) is False

    def test_mark_failed_never_overwrites_completed(self, seed_document: Document) -> None:
        repo = DocumentRepository()
        repo.claim_for_processing(seed_document.id)
        AnalysisRepository().create_analysis(seed_document.id, fallback_analysis())

        assert repo.mark_failed(seed_document.id) is False
        document = repo.get_document(seed_document.id)
        assert document is not None
        assert document.status is DocumentStatus.COMPLETED

    def test_pending_documents_are_listed(self, seed_document: Document) -> None:
        assert seed_document.id in DocumentRepository().list_pending_ids(1000)

    def test_find_owned_scopes_by_owner(self, seed_document: Document, owner_id: int) -> None:
        repo = DocumentRepository()
        assert repo.find_owned(seed_document.id, owner_id) is not None
        assert repo.find_owned(seed_document.id, owner_id + 1) is None


@pytest.mark.integration
class TestAnalysisPersistence:
    def test_round_trips_analysis_and_completes(
        self, seed_document: Document, owner_id: int
    ) -> None:
        DocumentRepository().claim_for_processing(seed_document.id)
        result = AnalysisResult(
            risk_score=64,
            overall_summary="summary",
            plain_english="plain",
            key_terms=["term"],
            clauses=[
                Clause(
                    ClauseType.TERMINATION,
                    "Either party may terminate.",
                    Severity.HIGH,
                    "No notice.",
                    ["Add notice"],
                    ClausePosition(2, "9.1"),
                )
            ],
        )

        AnalysisRepository().create_analysis(seed_document.id, result)
        stored = AnalysisRepository().find_by_document(seed_document.id)

        assert stored is not None
        assert stored.risk_score == 64
        assert stored.key_terms == ["term"]
        assert stored.clauses[0].position == ClausePosition(2, "9.1")
        items = DocumentRepository().list_documents(owner_id)
        assert items[0].document.status is DocumentStatus.COMPLETED
        assert items[0].analysis is not None

    def test_requires_processing_status(self, seed_document: Document) -> None:
        with pytest.raises(PersistenceError):
            AnalysisRepository().create_analysis(seed_document.id, fallback_analysis())

        assert AnalysisRepository().find_by_document(seed_document.id) is None

    def test_second_analysis_is_rejected(self, seed_document: Document) -> None:
        DocumentRepository().claim_for_processing(seed_document.id)
        AnalysisRepository().create_analysis(seed_document.id, fallback_analysis())

        with pytest.raises(PersistenceError):
            AnalysisRepository().create_analysis(seed_document.id, fallback_analysis())
