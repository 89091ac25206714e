import logging
from dataclasses import dataclass
from typing import Optional
from docchat.core.chunk.chunker import Chunker
from docchat.core.embed.base import EmbeddingService
from docchat.core.generate.base import CompletionService
from docchat.core.jobs.manager import JobManager
from docchat.core.jobs.status import StatusQuery
from docchat.core.parse.base import TextExtractor
from docchat.core.pipeline.answering import AnsweringPipeline
from docchat.core.pipeline.ingestion import IngestionPipeline
from docchat.core.pipeline.worker import IngestionWorker
from docchat.storage.base import VectorIndex, FileStore, JobStore
from docchat.storage.job_store import InMemoryJobStore

logger = logging.getLogger(__name__)

@dataclass
class Services:
    """Everything the routes need, built once per process."""
    jobs: JobManager
    status: StatusQuery
    file_store: FileStore
    worker: IngestionWorker
    answering: AnsweringPipeline

def assemble_services(extractor: TextExtractor,
                      embedder: EmbeddingService,
                      vector_index: VectorIndex,
                      llm: CompletionService,
                      file_store: FileStore,
                      job_store: Optional[JobStore] = None,
                      chunker: Optional[Chunker] = None,
                      max_workers: Optional[int] = None) -> Services:
    jobs = JobManager(job_store or InMemoryJobStore())
    ingestion = IngestionPipeline(
        jobs=jobs,
        extractor=extractor,
        embedder=embedder,
        vector_index=vector_index,
        file_store=file_store,
        chunker=chunker
    )
    return Services(
        jobs=jobs,
        status=StatusQuery(jobs),
        file_store=file_store,
        worker=IngestionWorker(ingestion, max_workers=max_workers),
        answering=AnsweringPipeline(vector_index=vector_index, embedder=embedder, llm=llm)
    )

def build_default_services() -> Services:
    """Production wiring: PyMuPDF, sentence-transformers, Qdrant, OpenAI-compatible LLM."""
    # Imported here so tests that inject fakes never load the heavy stacks
    from docchat.core.parse.pdf_parser import PDFTextExtractor
    from docchat.core.embed.embedder import SentenceTransformerEmbedder
    from docchat.core.generate.llm_client import LLMClient
    from docchat.storage.qdrant_store import QdrantVectorIndex
    from docchat.storage.file_store import LocalFileStore
    from docchat.config.settings import settings

    embedder = SentenceTransformerEmbedder()
    # Collections are sized from the model itself so an empty write matches later queries
    vector_dim = embedder.dimension
    if vector_dim != settings.embedding.vector_dim:
        logger.warning(f"embedding.vector_dim={settings.embedding.vector_dim} does not match "
                       f"{embedder.model_name} ({vector_dim}); using {vector_dim}")

    return assemble_services(
        extractor=PDFTextExtractor(),
        embedder=embedder,
        vector_index=QdrantVectorIndex(vector_dim=vector_dim),
        llm=LLMClient(),
        file_store=LocalFileStore(settings.storage.uploads_path)
    )
