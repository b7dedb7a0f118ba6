import time

from legalrisk.config.settings import Settings
from legalrisk.database.repositories.document_repository import DocumentRepository
from legalrisk.logging.logger import Log
from legalrisk.worker.dispatcher import Dispatcher


class Worker:
    """Poll loop: sleep -> list pending documents -> dispatch.

    Picks up uploads whose trigger was lost, e.g. across a restart.
    """

    def __init__(
        self,
        doc_repo: DocumentRepository,
        dispatcher: Dispatcher,
        settings: Settings,
    ) -> None:
        self._doc_repo = doc_repo
        self._dispatcher = dispatcher
        self._settings = settings

    def run(self, max_polls: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_polls is set, stop after that many polls (for testing).
        """
        Log.info("Worker started, polling for pending documents")
        polls = 0
        try:
            while max_polls is None or polls < max_polls:
                polls += 1
                dispatched = self._dispatch_pending()
                if dispatched == 0:
                    Log.debug("No pending documents, sleeping")
                time.sleep(self._settings.job_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _dispatch_pending(self) -> int:
        """Submit pending documents that have no active run. Gracefully handle DB errors."""
        try:
            pending = self._doc_repo.list_pending_ids(self._settings.worker_pool_size * 2)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return 0
        dispatched = 0
        for document_id in pending:
            if self._dispatcher.is_active(document_id):
                continue
            self._dispatcher.submit_for_processing(document_id)
            dispatched += 1
        return dispatched
