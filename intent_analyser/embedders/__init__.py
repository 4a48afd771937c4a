"""
Intent Analyser - Embedders for text vectorization
"""

from .adapter import EmbeddingAdapter, l2_normalize
from .sentence_transformer_embedder import SentenceTransformerEmbedder

__all__ = ["EmbeddingAdapter", "l2_normalize", "SentenceTransformerEmbedder"]
