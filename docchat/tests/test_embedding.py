import threading
import time
import numpy as np
from unittest.mock import MagicMock, patch

from docchat.core.embed.embedder import SentenceTransformerEmbedder

def fake_encode(inputs, **kwargs):
    if isinstance(inputs, str):
        return np.array([0.6, 0.8])
    return np.array([[1.0, 0.0] for _ in inputs])

def test_embedding_flow():
    with patch("docchat.core.embed.embedder.SentenceTransformer") as mock_model_cls:
        mock_model_cls.return_value.encode.side_effect = fake_encode
        SentenceTransformerEmbedder._models.clear()

        embedder = SentenceTransformerEmbedder(model_name="test-model")
        assert not mock_model_cls.called  # loaded lazily

        vectors = embedder.embed_documents(["Revenue was $5M.", "Costs were $3M."])
        query = embedder.embed_query("What was the revenue?")

        assert vectors == [[1.0, 0.0], [1.0, 0.0]]
        assert query == [0.6, 0.8]
        mock_model_cls.assert_called_once_with("test-model", device="cpu")

        args, _ = mock_model_cls.return_value.encode.call_args
        assert args[0].startswith(embedder.config.query_prefix)
        assert args[0].endswith("What was the revenue?")

        SentenceTransformerEmbedder(model_name="test-model").embed_documents(["again"])
        assert mock_model_cls.call_count == 1
        SentenceTransformerEmbedder._models.clear()

def test_empty_batch_skips_model():
    with patch("docchat.core.embed.embedder.SentenceTransformer") as mock_model_cls:
        assert SentenceTransformerEmbedder(model_name="unused").embed_documents([]) == []
        assert not mock_model_cls.called

def test_concurrent_first_use_loads_model_once():
    constructed = []

    def slow_model(name, device):
        constructed.append(name)
        time.sleep(0.2)
        model = MagicMock()
        model.encode.side_effect = fake_encode
        return model

    with patch("docchat.core.embed.embedder.SentenceTransformer", side_effect=slow_model):
        SentenceTransformerEmbedder._models.clear()
        embedder = SentenceTransformerEmbedder(model_name="slow-model")

        threads = [threading.Thread(target=embedder.embed_query, args=("q",)) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert constructed == ["slow-model"]
        SentenceTransformerEmbedder._models.clear()

def test_dimension_comes_from_loaded_model():
    with patch("docchat.core.embed.embedder.SentenceTransformer") as mock_model_cls:
        mock_model_cls.return_value.get_sentence_embedding_dimension.return_value = 768
        SentenceTransformerEmbedder._models.clear()

        assert SentenceTransformerEmbedder(model_name="wide-model").dimension == 768
        SentenceTransformerEmbedder._models.clear()
