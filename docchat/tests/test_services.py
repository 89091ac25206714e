from unittest.mock import patch
from qdrant_client import QdrantClient

from docchat.api.services import build_default_services
from docchat.config.settings import settings
from docchat.core.embed.embedder import SentenceTransformerEmbedder

def test_default_services_size_collections_from_the_model(tmp_path, monkeypatch):
    monkeypatch.setattr(settings.storage, "uploads_path", str(tmp_path))

    with patch("docchat.core.embed.embedder.SentenceTransformer") as mock_model_cls, \
         patch("docchat.storage.qdrant_store.build_client", return_value=QdrantClient(":memory:")):
        mock_model_cls.return_value.get_sentence_embedding_dimension.return_value = settings.embedding.vector_dim + 1
        SentenceTransformerEmbedder._models.clear()

        services = build_default_services()
        try:
            index = services.answering.vector_index
            assert index.vector_dim == settings.embedding.vector_dim + 1

            # Empty documents create a collection queryable with the model's vectors
            index.write("pdf-empty", [])
            assert index.retrieve("pdf-empty", [0.1] * index.vector_dim, k=3) == []
        finally:
            services.worker.shutdown()
            SentenceTransformerEmbedder._models.clear()
