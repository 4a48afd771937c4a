"""
Core shared types and protocols for intent-classifier.

This module centralizes domain types (Item, Match, Report), error types,
the embedding provider protocol, the cache layout and the embedding cache.
"""

from .types import (
    Priority,
    Category,
    PRIORITY_ORDER,
    CATEGORY_ORDER,
    Item,
    Match,
    Report,
    EmbedderSpec,
)

from .exceptions import (
    IntentClassifierError,
    EmbeddingError,
    CacheIOError,
    ConfigurationError,
)

from .protocols import EmbeddingProvider

from .layout import CacheLayout, default_cache_root

from .stores import EmbeddingCache

__all__ = [
    # Types
    "Priority",
    "Category",
    "PRIORITY_ORDER",
    "CATEGORY_ORDER",
    "Item",
    "Match",
    "Report",
    "EmbedderSpec",

    # Errors
    "IntentClassifierError",
    "EmbeddingError",
    "CacheIOError",
    "ConfigurationError",

    # Protocols
    "EmbeddingProvider",

    # Layout
    "CacheLayout",
    "default_cache_root",

    # Stores
    "EmbeddingCache",
]
