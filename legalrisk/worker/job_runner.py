from legalrisk.database.repositories.document_repository import DocumentRepository
from legalrisk.logging.logger import Log
from legalrisk.processor.processor import Processor


class PipelineRunner:
    """Claim one document, run the pipeline, and contain every failure.

    A failed run is not retried; re-upload or an explicit re-trigger is needed.
    """

    def __init__(self, processor: Processor, doc_repo: DocumentRepository) -> None:
        self._processor = processor
        self._doc_repo = doc_repo

    def run(self, document_id: int) -> bool:
        """Execute a single run. Returns True when the run reached COMPLETED."""
        try:
            claimed = self._doc_repo.claim_for_processing(document_id)
        except Exception:
            Log.exception(f"Could not claim document {document_id}")
            return False
        if not claimed:
            Log.info(f"Document {document_id} is not pending, skipping")
            return False

        try:
            self._processor.process(document_id)
        except Exception as exc:
            Log.error(f"Run for document {document_id} failed: {type(exc).__name__}: {exc}")
            return False
        Log.info(f"Document {document_id} processed successfully")
        return True
