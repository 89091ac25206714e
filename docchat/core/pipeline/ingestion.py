import logging
import time
from typing import Optional
from docchat.core.chunk.chunker import Chunker
from docchat.core.embed.base import EmbeddingService
from docchat.core.errors import (
    UpstreamError, ExtractionFailed, EmbeddingFailed, IndexWriteFailed
)
from docchat.core.jobs.manager import JobManager, PROGRESS_EXTRACTED, PROGRESS_EMBEDDED
from docchat.core.parse.base import TextExtractor
from docchat.models.chunk import IndexRecord
from docchat.models.job import Job
from docchat.storage.base import VectorIndex, FileStore

logger = logging.getLogger(__name__)

class IngestionPipeline:
    """
    Drives one job from pending to a terminal state:
    extract -> chunk -> embed -> index write -> complete

    Each stage runs once; there are no retries and no rollback of records
    already written when a later stage fails. Failures end up in the job
    record, never in an exception raised to the caller.
    """

    def __init__(self,
                 jobs: JobManager,
                 extractor: TextExtractor,
                 embedder: EmbeddingService,
                 vector_index: VectorIndex,
                 file_store: FileStore,
                 chunker: Optional[Chunker] = None):
        self.jobs = jobs
        self.extractor = extractor
        self.embedder = embedder
        self.vector_index = vector_index
        self.file_store = file_store
        self.chunker = chunker or Chunker()

    def run(self, job_id: str, source_path: str, collection_name: str) -> Job:
        started = time.time()
        try:
            self.jobs.start(job_id)

            # 1. Extraction
            try:
                document = self.file_store.read(source_path)
                segments = self.extractor.extract(document)
                chunks = self.chunker.chunk_document(job_id, segments)
            except Exception as e:
                raise ExtractionFailed(str(e) or type(e).__name__) from e
            logger.info(f"[{job_id}] extracted {len(segments)} segments -> {len(chunks)} chunks")
            self.jobs.checkpoint(job_id, PROGRESS_EXTRACTED)

            # 2. Embedding (single batched call)
            try:
                vectors = self.embedder.embed_documents([c.text for c in chunks]) if chunks else []
            except Exception as e:
                raise EmbeddingFailed(str(e) or type(e).__name__) from e
            if len(vectors) != len(chunks):
                raise EmbeddingFailed(f"Expected {len(chunks)} embeddings, got {len(vectors)}")
            self.jobs.checkpoint(job_id, PROGRESS_EMBEDDED)

            # 3. Index write
            records = [IndexRecord.from_chunk(c, v) for c, v in zip(chunks, vectors)]
            try:
                self.vector_index.write(collection_name, records)
            except Exception as e:
                raise IndexWriteFailed(str(e) or type(e).__name__) from e

            job = self.jobs.complete(job_id, chunk_count=len(records))
            logger.info(f"[{job_id}] indexing completed in {time.time() - started:.2f}s")
            return job

        except UpstreamError as e:
            logger.error(f"[{job_id}] {e.stage} failed: {e}")
            return self.jobs.fail(job_id, str(e))
        except Exception as e:
            logger.exception(f"[{job_id}] ingestion failed unexpectedly")
            return self.jobs.fail(job_id, str(e) or type(e).__name__)
