"""
Error types raised by the matching pipeline.
"""


class IntentClassifierError(Exception):
    """Base class for intent-classifier errors"""


class EmbeddingError(IntentClassifierError):
    """The embedding provider failed or returned a degenerate vector"""


class CacheIOError(IntentClassifierError, OSError):
    """Reading from or writing to the embedding cache failed"""


class ConfigurationError(IntentClassifierError, ValueError):
    """Invalid user-supplied configuration (threshold, workers, output type)"""
