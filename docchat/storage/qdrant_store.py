import hashlib
import logging
import threading
import uuid
from contextlib import nullcontext
from typing import List, Optional
from qdrant_client import QdrantClient
from qdrant_client.http import models as rest
from docchat.core.errors import CollectionNotFound
from docchat.models.chunk import IndexRecord
from docchat.models.query import RetrievedChunk
from docchat.storage.base import VectorIndex
from docchat.config.settings import settings

logger = logging.getLogger(__name__)


def _to_uuid(key: str) -> str:
    """Convert an arbitrary key to a deterministic UUID (Qdrant-compatible point ID).
    Hashes with SHA-256, takes the first 32 hex chars and formats as standard UUID.
    """
    return str(uuid.UUID(hashlib.sha256(key.encode()).hexdigest()[:32]))


def _is_remote() -> bool:
    return settings.qdrant.mode == "remote" or bool(settings.qdrant_url or settings.qdrant.url)


def build_client() -> QdrantClient:
    config = settings.qdrant
    url = settings.qdrant_url or config.url
    if _is_remote():
        return QdrantClient(url=url, api_key=settings.qdrant_api_key or None)
    if config.mode == "memory":
        return QdrantClient(":memory:")
    return QdrantClient(path=config.local_path)


class QdrantVectorIndex(VectorIndex):
    """
    Implements VectorIndex with one Qdrant collection per ingested document.
    Text and page metadata live in the point payload.
    """

    def __init__(self,
                 client: Optional[QdrantClient] = None,
                 vector_dim: Optional[int] = None,
                 embedded: Optional[bool] = None):
        self.client = client or build_client()
        self.vector_dim = vector_dim or settings.embedding.vector_dim
        if embedded is None:
            # An injected client of unknown kind is treated as embedded
            embedded = client is not None or not _is_remote()
        # The embedded (path / :memory:) client is not safe for concurrent use
        self._lock = threading.Lock() if embedded else nullcontext()

    def collection_exists(self, collection_name: str) -> bool:
        with self._lock:
            return self.client.collection_exists(collection_name=collection_name)

    def _ensure_collection(self, collection_name: str, size: int):
        if self.client.collection_exists(collection_name=collection_name):
            return
        logger.info(f"Creating Qdrant collection: {collection_name} (dim={size})")
        self.client.create_collection(
            collection_name=collection_name,
            vectors_config=rest.VectorParams(
                size=size,
                distance=rest.Distance.COSINE
            )
        )

    def write(self, collection_name: str, records: List[IndexRecord]) -> None:
        size = len(records[0].vector) if records else self.vector_dim

        points = []
        for record in records:
            payload = {"text": record.text, **record.metadata}
            key = f"{record.metadata.get('source_document_id')}:{record.metadata.get('chunk_index')}"
            points.append(rest.PointStruct(
                id=_to_uuid(key),
                vector=record.vector,
                payload=payload
            ))

        with self._lock:
            self._ensure_collection(collection_name, size)
            if points:
                self.client.upsert(
                    collection_name=collection_name,
                    points=points
                )
        logger.info(f"Wrote {len(points)} points to {collection_name}")

    def retrieve(self, collection_name: str, vector: List[float], k: int) -> List[RetrievedChunk]:
        with self._lock:
            if not self.client.collection_exists(collection_name=collection_name):
                raise CollectionNotFound(collection_name)
            results = self.client.query_points(
                collection_name=collection_name,
                query=vector,
                limit=k,
                with_payload=True
            ).points

        return [
            RetrievedChunk(
                rank=rank,
                text=(r.payload or {}).get("text", ""),
                page_number=(r.payload or {}).get("page_number"),
                score=r.score
            )
            for rank, r in enumerate(results, 1)
        ]
