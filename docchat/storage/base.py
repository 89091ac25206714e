from abc import ABC, abstractmethod
from typing import List, Optional
from docchat.models.chunk import IndexRecord
from docchat.models.job import Job
from docchat.models.query import RetrievedChunk
from docchat.core.errors import CollectionNotFound

class VectorIndex(ABC):
    @abstractmethod
    def write(self, collection_name: str, records: List[IndexRecord]) -> None:
        """Persist records under collection_name, creating the collection if absent."""
        pass

    @abstractmethod
    def retrieve(self, collection_name: str, vector: List[float], k: int) -> List[RetrievedChunk]:
        """Nearest neighbours in rank order. Raises CollectionNotFound if absent."""
        pass

    @abstractmethod
    def collection_exists(self, collection_name: str) -> bool:
        pass

    def ensure_exists(self, collection_name: str) -> None:
        if not self.collection_exists(collection_name):
            raise CollectionNotFound(collection_name)

class JobStore(ABC):
    """Backing for job records. Implementations must replace a record atomically."""

    @abstractmethod
    def get(self, job_id: str) -> Optional[Job]:
        pass

    @abstractmethod
    def put(self, job: Job) -> None:
        pass

    @abstractmethod
    def list(self) -> List[Job]:
        pass

class FileStore(ABC):
    @abstractmethod
    def save_upload(self, job_id: str, filename: str, file_bytes: bytes) -> str:
        """Returns the path the bytes were written to."""
        pass

    @abstractmethod
    def read(self, path: str) -> bytes:
        pass
