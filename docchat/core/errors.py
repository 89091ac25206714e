"""
Error taxonomy shared by the pipelines, the API layer and the client.

InputError      -> rejected synchronously, nothing is created.
NotFoundError   -> unknown job id or collection.
UpstreamError   -> an external capability (extractor, embedder, index, LLM) failed.
"""


class DocChatError(Exception):
    """Base class for all docchat errors."""


class InputError(DocChatError):
    pass


class NotFoundError(DocChatError):
    pass


class JobNotFound(NotFoundError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class CollectionNotFound(NotFoundError):
    def __init__(self, collection_name: str):
        self.collection_name = collection_name
        super().__init__(f"Collection not found: {collection_name}")


class UpstreamError(DocChatError):
    stage = "upstream"


class ExtractionFailed(UpstreamError):
    stage = "extraction"


class EmbeddingFailed(UpstreamError):
    stage = "embedding"


class IndexWriteFailed(UpstreamError):
    stage = "index_write"


class CompletionFailed(UpstreamError):
    stage = "completion"


class InvalidJobTransition(DocChatError):
    """Raised when a patch would break the job state machine."""
