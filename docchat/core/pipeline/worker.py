import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Optional
from docchat.core.pipeline.ingestion import IngestionPipeline
from docchat.models.job import Job
from docchat.config.settings import settings

logger = logging.getLogger(__name__)

class IngestionWorker:
    """
    Runs ingestion jobs in the background.
    submit() returns as soon as the run is queued; the only way to observe the
    outcome is the job record (or the returned Future, for tests and shutdown).
    """

    def __init__(self, pipeline: IngestionPipeline, max_workers: Optional[int] = None):
        self.pipeline = pipeline
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.worker.max_workers,
            thread_name_prefix="ingest"
        )
        self._futures: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def submit(self, job_id: str, source_path: str, collection_name: str) -> Future:
        # Registered under the lock so _run cannot unregister before we register
        with self._lock:
            future = self._executor.submit(self._run, job_id, source_path, collection_name)
            self._futures[job_id] = future
        logger.info(f"[{job_id}] queued for ingestion")
        return future

    def _run(self, job_id: str, source_path: str, collection_name: str) -> Job:
        try:
            return self.pipeline.run(job_id, source_path, collection_name)
        finally:
            with self._lock:
                self._futures.pop(job_id, None)

    def wait(self, job_id: str, timeout: Optional[float] = None) -> Optional[Job]:
        """Blocks until the job's run finishes. Returns None if it is not running."""
        with self._lock:
            future = self._futures.get(job_id)
        if future is None:
            return None
        return future.result(timeout=timeout)

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
