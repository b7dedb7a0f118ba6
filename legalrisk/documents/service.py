from legalrisk.database.models import DocumentListItem, DocumentWithAnalysis
from legalrisk.database.repositories.analysis_repository import AnalysisRepository
from legalrisk.database.repositories.document_repository import DocumentRepository
from legalrisk.documents.models import SimilarDocumentItem
from legalrisk.extraction.exceptions import UnsupportedFormatError
from legalrisk.extraction.text_extractor import TextExtractor, is_supported_mime_type
from legalrisk.logging.logger import Log
from legalrisk.processor.file_loader import FileLoader
from legalrisk.processor.models import Document
from legalrisk.retrieval.retriever import ContextRetriever
from legalrisk.worker.dispatcher import Dispatcher


class DocumentService:
    """Upload intake and owner-scoped read models.

    Every read is filtered by owner; a document of another owner is
    indistinguishable from a missing one.
    """

    def __init__(
        self,
        *,
        doc_repo: DocumentRepository,
        analysis_repo: AnalysisRepository,
        dispatcher: Dispatcher,
        file_loader: FileLoader,
        text_extractor: TextExtractor,
        retriever: ContextRetriever,
    ) -> None:
        self._doc_repo = doc_repo
        self._analysis_repo = analysis_repo
        self._dispatcher = dispatcher
        self._file_loader = file_loader
        self._text_extractor = text_extractor
        self._retriever = retriever

    def accept_upload(
        self,
        *,
        owner_id: int,
        original_filename: str,
        storage_filename: str,
        mime_type: str,
        size_bytes: int,
    ) -> Document:
        """Register a stored upload as PENDING and trigger processing.

        Raises:
            UnsupportedFormatError: if the file is neither PDF nor Word. No
                row is created in that case.
        """
        if not is_supported_mime_type(mime_type):
            raise UnsupportedFormatError(
                f"Unsupported MIME type '{mime_type}'; only PDF and Word are accepted"
            )
        document = self._doc_repo.create_document(
            owner_id=owner_id,
            original_filename=original_filename,
            storage_filename=storage_filename,
            mime_type=mime_type,
            size_bytes=size_bytes,
        )
        Log.info(f"Accepted upload '{original_filename}' as document {document.id}")
        self.submit_for_processing(document.id)
        return document

    def submit_for_processing(self, document_id: int) -> None:
        self._dispatcher.submit_for_processing(document_id)

    def list_documents(self, owner_id: int) -> list[DocumentListItem]:
        return self._doc_repo.list_documents(owner_id)

    def get_document_with_analysis(
        self, document_id: int, owner_id: int
    ) -> DocumentWithAnalysis | None:
        document = self._doc_repo.find_owned(document_id, owner_id)
        if document is None:
            return None
        return DocumentWithAnalysis(
            document=document,
            analysis=self._analysis_repo.find_by_document(document_id),
        )

    def find_similar_documents(
        self, document_id: int, owner_id: int, top_k: int = 5
    ) -> list[SimilarDocumentItem] | None:
        """Owner's documents most similar to this one, best match first.

        The text is re-extracted from the stored file since it is never
        persisted. Returns None for an unknown document.
        """
        document = self._doc_repo.find_owned(document_id, owner_id)
        if document is None:
            return None

        raw_bytes = self._file_loader.load(document)
        text = self._text_extractor.extract(raw_bytes, document.mime_type).strip()
        if not text:
            return []

        matches = self._retriever.find_similar(text, owner_id, top_k, exclude_id=document_id)
        similarity_by_id: dict[int, float] = {}
        for match in matches:
            try:
                similarity_by_id[int(match.id)] = match.similarity
            except ValueError:
                Log.warning(f"Ignoring non-document index entry '{match.id}'")

        items = self._doc_repo.find_many_owned(list(similarity_by_id), owner_id)
        results = [
            SimilarDocumentItem(
                document=item.document,
                similarity=round(similarity_by_id[item.document.id] * 100),
                analysis=item.analysis,
            )
            for item in items
        ]
        results.sort(key=lambda r: r.similarity, reverse=True)
        return results
