from legalrisk.analysis.base import BaseAnalyzer
from legalrisk.config.settings import Settings
from legalrisk.database.repositories.analysis_repository import AnalysisRepository
from legalrisk.database.repositories.document_repository import DocumentRepository
from legalrisk.extraction.text_extractor import TextExtractor
from legalrisk.logging.logger import Log
from legalrisk.processor.file_loader import FileLoader
from legalrisk.processor.pipeline import PipelineContext, PipelineStep
from legalrisk.processor.steps import (
    AnalyzeStep,
    DetectDocumentTypeStep,
    ExtractTextStep,
    GatherContextStep,
    IndexClausesStep,
    LoadDocumentStep,
    MarkFailedStep,
    PersistAnalysisStep,
    UpdateIndexMetadataStep,
)
from legalrisk.retrieval.indexer import DocumentIndexer
from legalrisk.retrieval.retriever import ContextRetriever


class Processor:
    """Drives one claimed document through the pipeline.

    Pipeline: load -> extract -> detect type -> (store embedding || retrieve
    similar) -> analyze -> persist + complete -> index clauses -> update
    index metadata.

    The caller must have moved the document to PROCESSING. Any exception
    escaping a step triggers the failed step exactly once and is re-raised.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, document_id: int) -> PipelineContext:
        Log.info(f"Processing document {document_id}")
        context = PipelineContext(document_id=document_id)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = f"{type(exc).__name__}: {exc}"
            self._failed_step.run(context)
            raise
        return context


def build_processor(
    *,
    settings: Settings,
    file_loader: FileLoader,
    doc_repo: DocumentRepository,
    analysis_repo: AnalysisRepository,
    text_extractor: TextExtractor,
    indexer: DocumentIndexer,
    retriever: ContextRetriever,
    analyzer: BaseAnalyzer,
) -> Processor:
    """Assemble the step list from already-constructed collaborators."""
    timeout = float(settings.side_task_timeout_seconds)
    steps: list[PipelineStep] = [
        LoadDocumentStep(file_loader=file_loader, doc_repo=doc_repo),
        ExtractTextStep(text_extractor=text_extractor),
        DetectDocumentTypeStep(),
        GatherContextStep(
            indexer=indexer,
            retriever=retriever,
            top_k=settings.similar_documents_top_k,
            timeout_seconds=timeout,
        ),
        AnalyzeStep(analyzer=analyzer),
        PersistAnalysisStep(analysis_repo=analysis_repo),
        IndexClausesStep(indexer=indexer, timeout_seconds=timeout),
        UpdateIndexMetadataStep(indexer=indexer, timeout_seconds=timeout),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep(doc_repo))
