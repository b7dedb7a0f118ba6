import threading
from concurrent.futures import Future, ThreadPoolExecutor

from legalrisk.logging.logger import Log
from legalrisk.worker.job_runner import PipelineRunner


class Dispatcher:
    """Fire-and-forget trigger backed by a bounded worker pool.

    At most one run per document id is in flight in this process; across
    processes the conditional PENDING -> PROCESSING claim decides.
    """

    def __init__(self, runner: PipelineRunner, max_workers: int) -> None:
        self._runner = runner
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="pipeline"
        )
        self._active: set[int] = set()
        self._lock = threading.Lock()
        self._closed = False

    def submit_for_processing(self, document_id: int) -> None:
        """Schedule a run and return immediately. No-op when a run for this
        document is already in flight."""
        with self._lock:
            if self._closed:
                raise RuntimeError("Dispatcher is shut down")
            if document_id in self._active:
                Log.debug(f"Document {document_id} already has an active run")
                return
            self._active.add(document_id)
            try:
                future = self._executor.submit(self._runner.run, document_id)
            except RuntimeError:
                self._active.discard(document_id)
                raise
        # Outside the lock: the callback takes it and may run inline.
        future.add_done_callback(lambda f: self._on_done(document_id, f))
        Log.info(f"Document {document_id} submitted for processing")

    def is_active(self, document_id: int) -> bool:
        with self._lock:
            return document_id in self._active

    def active_count(self) -> int:
        with self._lock:
            return len(self._active)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    def _on_done(self, document_id: int, future: Future[bool]) -> None:
        with self._lock:
            self._active.discard(document_id)
        if not future.cancelled() and future.exception() is not None:
            Log.error(f"Run for document {document_id} raised: {future.exception()}")
