"""
Data stores for intent-classifier.

- EmbeddingCache: content-addressed on-disk cache of item embeddings
"""

from .embeddings import EmbeddingCache

__all__ = [
    "EmbeddingCache",
]
