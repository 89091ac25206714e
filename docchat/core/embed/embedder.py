import logging
import threading
from typing import List
from sentence_transformers import SentenceTransformer
from docchat.core.embed.base import EmbeddingService
from docchat.config.settings import settings

logger = logging.getLogger(__name__)

class SentenceTransformerEmbedder(EmbeddingService):
    """
    Handles embedding generation for chunks and queries.
    - Model is loaded lazily on first use and shared across instances.
    - Supports batched embedding and L2 normalisation.
    """

    _models = {}
    _models_lock = threading.Lock()

    def __init__(self, model_name: str = None):
        self.config = settings.embedding
        self.model_name = model_name or self.config.model_name

    @property
    def model(self) -> SentenceTransformer:
        model = SentenceTransformerEmbedder._models.get(self.model_name)
        if model is not None:
            return model
        with SentenceTransformerEmbedder._models_lock:
            # Another thread may have finished loading while we waited
            if self.model_name not in SentenceTransformerEmbedder._models:
                logger.info(f"Loading embedding model: {self.model_name}...")
                SentenceTransformerEmbedder._models[self.model_name] = SentenceTransformer(self.model_name, device="cpu")
            return SentenceTransformerEmbedder._models[self.model_name]

    @property
    def dimension(self) -> int:
        """Vector size the loaded model actually produces."""
        return self.model.get_sentence_embedding_dimension() or self.config.vector_dim

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []

        embeddings = self.model.encode(
            texts,
            batch_size=self.config.batch_size,
            show_progress_bar=False,
            normalize_embeddings=self.config.normalise
        )
        return [e.tolist() for e in embeddings]

    def embed_query(self, query: str) -> List[float]:
        # BGE models expect an instruction prefix on queries only
        prefixed_query = f"{self.config.query_prefix}{query}"

        embedding = self.model.encode(
            prefixed_query,
            normalize_embeddings=self.config.normalise
        )
        return embedding.tolist()
