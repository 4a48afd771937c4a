"""
Tests for the sentence-transformers provider, with the library mocked out
"""

import sys
import threading
import types
from unittest.mock import Mock, patch

import numpy as np
import pytest

from intent_core.exceptions import EmbeddingError
from intent_analyser.embedders.sentence_transformer_embedder import SentenceTransformerEmbedder


def _make_model(*args, **kwargs):
    model = Mock()
    model.get_sentence_embedding_dimension.return_value = 8
    model.max_seq_length = 128
    model.encode.side_effect = lambda text, **kw: np.arange(1, 9, dtype=np.float32)
    return model


@pytest.fixture
def fake_sentence_transformers():
    """Replace the sentence_transformers module with a stub factory"""
    module = types.ModuleType("sentence_transformers")
    module.SentenceTransformer = Mock(side_effect=_make_model)
    with patch.dict(sys.modules, {"sentence_transformers": module}):
        yield module


class TestSentenceTransformerEmbedder:
    """Test the sentence-transformers embedding provider"""

    def test_lazy_load_does_not_load_model(self, fake_sentence_transformers):
        """Test no model is loaded at construction with lazy_load"""
        SentenceTransformerEmbedder(lazy_load=True)
        fake_sentence_transformers.SentenceTransformer.assert_not_called()

    def test_eager_load(self, fake_sentence_transformers):
        """Test eager loading passes model options through"""
        SentenceTransformerEmbedder("some-model", lazy_load=False, device="cpu", cache_folder="/tmp/models")
        fake_sentence_transformers.SentenceTransformer.assert_called_once_with(
            "some-model", device="cpu", cache_folder="/tmp/models", revision=None
        )

    def test_spec_and_limits(self, fake_sentence_transformers):
        """Test spec and token window come from the loaded model"""
        embedder = SentenceTransformerEmbedder("some-model", revision="abc")
        spec = embedder.spec
        assert spec.model_name == "some-model"
        assert spec.dim == 8
        assert spec.revision == "abc"
        assert embedder.max_tokens == 128

    def test_embed_single_text(self, fake_sentence_transformers):
        """Test a single text is encoded without normalization"""
        embedder = SentenceTransformerEmbedder()
        vec = embedder.embed("review python code", max_length=6)

        assert vec.dtype == np.float32
        assert vec.shape == (8,)
        model = embedder._model()
        args, kwargs = model.encode.call_args
        assert args[0] == "review"
        assert kwargs["convert_to_numpy"] is True
        assert kwargs["normalize_embeddings"] is False

    def test_same_thread_reuses_model(self, fake_sentence_transformers):
        """Test one thread loads the model once"""
        embedder = SentenceTransformerEmbedder()
        embedder.embed("one", 100)
        embedder.embed("two", 100)
        assert fake_sentence_transformers.SentenceTransformer.call_count == 1

    def test_each_thread_gets_its_own_model(self, fake_sentence_transformers):
        """Test concurrent threads never share a model instance"""
        embedder = SentenceTransformerEmbedder()
        models = []
        lock = threading.Lock()

        def worker():
            model = embedder._model()
            with lock:
                models.append(model)

        threads = [threading.Thread(target=worker) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(m) for m in models}) == 3
        assert fake_sentence_transformers.SentenceTransformer.call_count == 3

    def test_load_failure_is_embedding_error(self, fake_sentence_transformers):
        """Test a model that cannot be loaded raises EmbeddingError naming it"""
        fake_sentence_transformers.SentenceTransformer.side_effect = OSError("model not found on hub")
        embedder = SentenceTransformerEmbedder("no-such-model")

        with pytest.raises(EmbeddingError, match="no-such-model"):
            embedder.spec
        with pytest.raises(EmbeddingError, match="model not found on hub"):
            embedder.embed("review code", 100)
