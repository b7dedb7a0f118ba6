from concurrent.futures import wait
from time import monotonic

from legalrisk.analysis.base import BaseAnalyzer
from legalrisk.analysis.exceptions import AnalysisUnavailableError
from legalrisk.analysis.fallback import fallback_analysis
from legalrisk.database.repositories.analysis_repository import AnalysisRepository
from legalrisk.database.repositories.document_repository import DocumentRepository
from legalrisk.extraction.text_extractor import TextExtractor
from legalrisk.logging.logger import Log
from legalrisk.processor.exceptions import DocumentNotFoundError, NoTextExtractedError
from legalrisk.processor.file_loader import FileLoader
from legalrisk.processor.models import Document
from legalrisk.processor.pipeline import PipelineContext, PipelineStep
from legalrisk.processor.side_tasks import (
    SideTask,
    await_side_task,
    run_side_task,
    start_side_task,
)
from legalrisk.retrieval.document_type import detect_document_type
from legalrisk.retrieval.indexer import DocumentIndexer
from legalrisk.retrieval.retriever import ContextRetriever


def _require_document(context: PipelineContext) -> Document:
    if context.document is None:
        raise ValueError("PipelineContext.document must be set before this step")
    return context.document


class MarkFailedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if self._doc_repo.mark_failed(context.document_id):
            Log.error(
                f"Document {context.document_id} marked as failed: {context.error_message}"
            )
        else:
            Log.warning(
                f"Document {context.document_id} already terminal, not marked failed: "
                f"{context.error_message}"
            )
        return context


class LoadDocumentStep(PipelineStep):
    def __init__(self, file_loader: FileLoader, doc_repo: DocumentRepository) -> None:
        self._file_loader = file_loader
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = self._doc_repo.get_document(context.document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {context.document_id} not found")
        context.document = document
        context.raw_bytes = self._file_loader.load(document)
        Log.info(f"Loaded {len(context.raw_bytes)} bytes for document {context.document_id}")
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, text_extractor: TextExtractor) -> None:
        self._text_extractor = text_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        text = self._text_extractor.extract(context.raw_bytes, document.mime_type).strip()
        context.raw_bytes = b""
        if not text:
            raise NoTextExtractedError(
                f"No text could be extracted from document {context.document_id}"
            )
        context.extracted_text = text
        Log.info(f"Extracted {len(text)} chars from document {context.document_id}")
        return context


class DetectDocumentTypeStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.document_type = detect_document_type(context.extracted_text)
        Log.info(f"Document {context.document_id} detected as '{context.document_type}'")
        return context


class GatherContextStep(PipelineStep):
    """Stores the document embedding and retrieves similar documents concurrently.

    Both halves are best-effort; analysis starts only after both resolved.
    """

    def __init__(
        self,
        indexer: DocumentIndexer,
        retriever: ContextRetriever,
        top_k: int,
        timeout_seconds: float,
    ) -> None:
        self._indexer = indexer
        self._retriever = retriever
        self._top_k = top_k
        self._timeout_seconds = timeout_seconds

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        text = context.extracted_text
        store = SideTask(
            "store_document_embedding",
            lambda: self._indexer.store_document(document, text, context.document_type),
        )
        lookup = SideTask(
            "find_similar_documents",
            lambda: self._retriever.find_similar(
                text, document.owner_id, self._top_k, exclude_id=document.id
            ),
            default=[],
        )
        store_future = start_side_task(store)
        lookup_future = start_side_task(lookup)
        deadline = monotonic() + self._timeout_seconds
        context.similar_documents = list(await_side_task(lookup, lookup_future, deadline))
        await_side_task(store, store_future, deadline)
        if not store_future.done():
            context.pending_document_entry = store_future
        Log.info(
            f"Found {len(context.similar_documents)} similar documents for document "
            f"{context.document_id}"
        )
        return context


class AnalyzeStep(PipelineStep):
    def __init__(self, analyzer: BaseAnalyzer) -> None:
        self._analyzer = analyzer

    def run(self, context: PipelineContext) -> PipelineContext:
        try:
            context.analysis = self._analyzer.analyze(
                context.extracted_text, context.similar_documents
            )
        except AnalysisUnavailableError as exc:
            Log.warning(f"Analysis unavailable for document {context.document_id}: {exc}")
            context.analysis = fallback_analysis()
        return context


class PersistAnalysisStep(PipelineStep):
    """Writes the analysis and completes the document in one transaction."""

    def __init__(self, analysis_repo: AnalysisRepository) -> None:
        self._analysis_repo = analysis_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.analysis is None:
            raise ValueError("PipelineContext.analysis must be set before persist")
        context.stored_analysis = self._analysis_repo.create_analysis(
            context.document_id, context.analysis
        )
        Log.info(
            f"Document {context.document_id} completed with analysis "
            f"{context.stored_analysis.id} (risk score {context.analysis.risk_score})"
        )
        return context


class IndexClausesStep(PipelineStep):
    def __init__(self, indexer: DocumentIndexer, timeout_seconds: float) -> None:
        self._indexer = indexer
        self._timeout_seconds = timeout_seconds

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        if context.stored_analysis is None or not context.stored_analysis.clauses:
            return context
        clauses = context.stored_analysis.clauses
        run_side_task(
            SideTask("store_clause_embeddings", lambda: self._indexer.store_clauses(document, clauses)),
            self._timeout_seconds,
        )
        return context


class UpdateIndexMetadataStep(PipelineStep):
    """Merges analysis fields into the document-level index entry.

    The merge must land after the entry's upsert. If that upsert is still
    running when this step's timeout expires, the merge is chained onto it.
    """

    def __init__(self, indexer: DocumentIndexer, timeout_seconds: float) -> None:
        self._indexer = indexer
        self._timeout_seconds = timeout_seconds

    def run(self, context: PipelineContext) -> PipelineContext:
        analysis = context.analysis
        if analysis is None:
            return context
        task = SideTask(
            "update_document_metadata",
            lambda: self._indexer.mark_analyzed(context.document_id, analysis),
        )
        pending = context.pending_document_entry
        if pending is not None:
            _, not_done = wait([pending], timeout=self._timeout_seconds)
            if not_done:
                Log.warning(
                    f"Embedding for document {context.document_id} is still being stored; "
                    "metadata update deferred until it lands"
                )
                pending.add_done_callback(lambda _: _run_deferred(task))
                return context
        run_side_task(task, self._timeout_seconds)
        return context


def _run_deferred(task: SideTask) -> None:
    try:
        task.func()
    except Exception as exc:
        Log.warning(f"Side task '{task.name}' failed; continuing without it: {exc}")
