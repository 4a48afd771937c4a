"""
Sentence Transformer-based embedding provider
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

import numpy as np

from intent_core.exceptions import EmbeddingError
from intent_core.types import EmbedderSpec

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "all-MiniLM-L6-v2"
# Used when a model does not declare max_seq_length
DEFAULT_MAX_TOKENS = 512


class SentenceTransformerEmbedder:
    """
    Embedding provider backed by the sentence-transformers library.

    Each worker thread gets its own model instance, so concurrent `embed`
    calls never share encoder state. Within a thread every call encodes a
    single text on its own, with no state carried between texts.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL_NAME,
        revision: Optional[str] = None,
        lazy_load: bool = True,
        device: Optional[str] = None,
        cache_folder: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize the embedder

        Args:
            model_name: Name or local path of the sentence transformer model
            revision: Model revision (optional)
            lazy_load: If True, don't load the model until first use
            device: Torch device, e.g. "cpu", "cuda" or "mps" (auto if None)
            cache_folder: Where downloaded model weights are stored
        """
        self.model_name = model_name
        self.revision = revision
        self.device = device
        self.cache_folder = str(cache_folder) if cache_folder is not None else None
        self._local = threading.local()
        self._dim: Optional[int] = None
        self._max_tokens: Optional[int] = None

        if not lazy_load:
            self._model()

    def _load_model(self):
        """
        Load a fresh sentence transformer model

        Raises:
            EmbeddingError: if the model cannot be found, downloaded or loaded
        """
        from sentence_transformers import SentenceTransformer

        logger.info(f"Loading embedding model {self.model_name}")
        try:
            model = SentenceTransformer(
                self.model_name,
                device=self.device,
                cache_folder=self.cache_folder,
                revision=self.revision,
            )
        except Exception as e:
            raise EmbeddingError(f"Failed to load embedding model {self.model_name}: {e}") from e
        if self._dim is None:
            dim = model.get_sentence_embedding_dimension()
            if dim is None:
                dim = int(model.encode("test", convert_to_numpy=True).shape[-1])
            self._dim = int(dim)
        if self._max_tokens is None:
            self._max_tokens = int(model.max_seq_length or DEFAULT_MAX_TOKENS)
        return model

    def _model(self):
        """Get the calling thread's model, loading it on first use"""
        model = getattr(self._local, "model", None)
        if model is None:
            model = self._load_model()
            self._local.model = model
        return model

    @property
    def dim(self) -> int:
        if self._dim is None:
            self._model()
        return self._dim

    @property
    def max_tokens(self) -> int:
        if self._max_tokens is None:
            self._model()
        return self._max_tokens

    @property
    def spec(self) -> EmbedderSpec:
        """Get the embedder specification"""
        return EmbedderSpec(
            model_name=self.model_name,
            dim=self.dim,
            revision=self.revision
        )

    def embed(self, text: str, max_length: int) -> np.ndarray:
        """
        Generate the raw (unnormalized) embedding for a single text

        Args:
            text: Text to embed
            max_length: Maximum input length in characters

        Returns:
            Embedding vector with shape (dim,)
        """
        embedding = self._model().encode(
            text[:max_length],
            convert_to_numpy=True,
            normalize_embeddings=False,
            show_progress_bar=False,
        )
        return np.asarray(embedding, dtype=np.float32)
