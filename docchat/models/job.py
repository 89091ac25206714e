from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class JobStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.completed, JobStatus.failed)

class Job(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    status: JobStatus
    progress: int                    # 0–100, never decreases
    collection_name: str
    error: str | None = None         # only when status == failed
    source_file: str | None = None
    chunk_count: int | None = None
    created_at: str
    updated_at: str
    completed_at: str | None = None

class JobStatusResponse(BaseModel):
    """Payload returned by the status endpoint."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    job_id: str
    status: JobStatus
    progress: int
    collection_name: str
    error: str | None = None
    chunk_count: int | None = None
    completed_at: str | None = None

class UploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    job_id: str
    collection_name: str
    message: str = "Upload successful, indexing started"
