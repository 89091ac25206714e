from docchat.core.jobs.manager import JobManager
from docchat.models.job import JobStatusResponse

class StatusQuery:
    """Read-only view of job state for pollers. Never mutates anything."""

    def __init__(self, manager: JobManager):
        self.manager = manager

    def get(self, job_id: str) -> JobStatusResponse:
        job = self.manager.get(job_id)
        return JobStatusResponse(
            job_id=job.id,
            status=job.status,
            progress=job.progress,
            collection_name=job.collection_name,
            error=job.error,
            chunk_count=job.chunk_count,
            completed_at=job.completed_at
        )
