import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Optional
from docchat.core.errors import InvalidJobTransition, JobNotFound
from docchat.models.job import Job, JobStatus
from docchat.storage.base import JobStore
from docchat.config.settings import settings

logger = logging.getLogger(__name__)

# Fixed milestones observable by pollers
PROGRESS_STARTED = 10
PROGRESS_EXTRACTED = 40
PROGRESS_EMBEDDED = 60
PROGRESS_DONE = 100

_ALLOWED = {
    JobStatus.pending: {JobStatus.processing, JobStatus.failed},
    JobStatus.processing: {JobStatus.processing, JobStatus.completed, JobStatus.failed},
    JobStatus.completed: set(),
    JobStatus.failed: set(),
}

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

class JobManager:
    """
    Owns the lifecycle of ingestion jobs.

    pending -> processing -> completed | failed  (pending -> failed is allowed too)

    Every mutation goes through advance(), which validates the patch against the
    current record and swaps in a new immutable Job in one step.
    """

    def __init__(self, store: JobStore):
        self.store = store
        self._lock = threading.Lock()

    def create(self,
               job_id: Optional[str] = None,
               collection_name: Optional[str] = None,
               source_file: Optional[str] = None) -> Job:
        job_id = job_id or str(uuid.uuid4())
        now = _now()
        job = Job(
            id=job_id,
            status=JobStatus.pending,
            progress=0,
            collection_name=collection_name or f"{settings.qdrant.collection_prefix}{job_id}",
            source_file=source_file,
            created_at=now,
            updated_at=now
        )
        self.store.put(job)
        logger.info(f"[{job_id}] created (collection={job.collection_name})")
        return job

    def get(self, job_id: str) -> Job:
        job = self.store.get(job_id)
        if job is None:
            raise JobNotFound(job_id)
        return job

    def advance(self, job_id: str, **patch) -> Job:
        unknown = set(patch) - {"status", "progress", "error", "chunk_count"}
        if unknown:
            raise InvalidJobTransition(f"Fields not patchable: {sorted(unknown)}")

        with self._lock:
            current = self.get(job_id)
            status = JobStatus(patch.get("status", current.status))
            progress = patch.get("progress", current.progress)

            if current.status.is_terminal:
                raise InvalidJobTransition(f"Job {job_id} is already {current.status.value}")
            if status not in _ALLOWED[current.status]:
                raise InvalidJobTransition(f"Job {job_id}: {current.status.value} -> {status.value} not allowed")
            if not 0 <= progress <= 100:
                raise InvalidJobTransition(f"Job {job_id}: progress {progress} out of range")
            if progress < current.progress:
                raise InvalidJobTransition(f"Job {job_id}: progress may not go from {current.progress} to {progress}")
            if patch.get("error") is not None and status != JobStatus.failed:
                raise InvalidJobTransition(f"Job {job_id}: error is only valid on failed jobs")

            now = _now()
            updated = current.model_copy(update={
                **patch,
                "status": status,
                "progress": progress,
                "updated_at": now,
                "completed_at": now if status.is_terminal else None
            })
            self.store.put(updated)

        logger.info(f"[{job_id}] {updated.status.value} {updated.progress}%")
        return updated

    def start(self, job_id: str) -> Job:
        return self.advance(job_id, status=JobStatus.processing, progress=PROGRESS_STARTED)

    def checkpoint(self, job_id: str, progress: int) -> Job:
        return self.advance(job_id, status=JobStatus.processing, progress=progress)

    def complete(self, job_id: str, chunk_count: int) -> Job:
        return self.advance(job_id, status=JobStatus.completed, progress=PROGRESS_DONE, chunk_count=chunk_count)

    def fail(self, job_id: str, message: str) -> Job:
        # Progress stays at the last checkpoint reached
        return self.advance(job_id, status=JobStatus.failed, error=message or "Unknown error")
