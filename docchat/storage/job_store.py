import threading
from typing import Dict, List, Optional
from docchat.models.job import Job
from docchat.storage.base import JobStore

class InMemoryJobStore(JobStore):
    """
    Process-lifetime job table. Records are immutable Job models, so a put is
    a single reference swap under the lock; nothing is ever deleted.
    """

    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def put(self, job: Job) -> None:
        with self._lock:
            self._jobs[job.id] = job

    def list(self) -> List[Job]:
        with self._lock:
            return list(self._jobs.values())
