from dataclasses import dataclass
from pathlib import Path

from legalrisk.analysis.base import BaseAnalyzer
from legalrisk.analysis.factory import AnalyzerFactory
from legalrisk.config.settings import Settings
from legalrisk.database.repositories.analysis_repository import AnalysisRepository
from legalrisk.database.repositories.document_repository import DocumentRepository
from legalrisk.documents.service import DocumentService
from legalrisk.embedding.base import BaseEmbeddingClient
from legalrisk.embedding.factory import EmbeddingClientFactory
from legalrisk.extraction.factory import TextExtractorFactory
from legalrisk.logging.logger import Log
from legalrisk.processor.file_loader import FileLoader
from legalrisk.processor.processor import build_processor
from legalrisk.retrieval.indexer import DocumentIndexer
from legalrisk.retrieval.retriever import ContextRetriever
from legalrisk.vectorindex.base import BaseVectorIndex
from legalrisk.vectorindex.factory import VectorIndexFactory
from legalrisk.worker.dispatcher import Dispatcher
from legalrisk.worker.job_runner import PipelineRunner
from legalrisk.worker.worker import Worker


@dataclass
class Container:
    """Process-wide objects, built once at startup."""

    settings: Settings
    embedding_client: BaseEmbeddingClient
    vector_index: BaseVectorIndex
    analyzer: BaseAnalyzer
    dispatcher: Dispatcher
    document_service: DocumentService
    worker: Worker

    def close(self) -> None:
        """Drain in-flight runs, then release external clients."""
        self.dispatcher.shutdown(wait=True)
        self.analyzer.close()
        self.embedding_client.close()
        self.vector_index.close()
        Log.info("Container closed")


def build_container(settings: Settings) -> Container:
    """Wire every external client and service. The database pool must
    already be initialized."""
    embedding_client = EmbeddingClientFactory.create(settings)
    vector_index = VectorIndexFactory.create(settings)
    analyzer = AnalyzerFactory.create(settings)
    text_extractor = TextExtractorFactory.create(settings)
    file_loader = FileLoader(files_root=Path(settings.files_root))

    doc_repo = DocumentRepository()
    analysis_repo = AnalysisRepository()
    retriever = ContextRetriever(embedding_client, vector_index)
    indexer = DocumentIndexer(embedding_client, vector_index)

    processor = build_processor(
        settings=settings,
        file_loader=file_loader,
        doc_repo=doc_repo,
        analysis_repo=analysis_repo,
        text_extractor=text_extractor,
        indexer=indexer,
        retriever=retriever,
        analyzer=analyzer,
    )
    dispatcher = Dispatcher(PipelineRunner(processor, doc_repo), settings.worker_pool_size)
    document_service = DocumentService(
        doc_repo=doc_repo,
        analysis_repo=analysis_repo,
        dispatcher=dispatcher,
        file_loader=file_loader,
        text_extractor=text_extractor,
        retriever=retriever,
    )
    worker = Worker(doc_repo, dispatcher, settings)
    Log.info(
        f"Container built: analysis={settings.analysis_provider}, "
        f"embedding={settings.embedding_provider}, index={settings.vector_index_backend}"
    )
    return Container(
        settings=settings,
        embedding_client=embedding_client,
        vector_index=vector_index,
        analyzer=analyzer,
        dispatcher=dispatcher,
        document_service=document_service,
        worker=worker,
    )
