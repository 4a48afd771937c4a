"""
Adapter between the matcher and an embedding provider

Applies the truncation policy that keeps inputs within the model's context
window and turns provider output into unit-length float32 vectors.
"""

import logging
from typing import Optional

import numpy as np

from intent_core.exceptions import EmbeddingError
from intent_core.protocols import EmbeddingProvider
from intent_core.types import EmbedderSpec

logger = logging.getLogger(__name__)

# Tokens kept free for special tokens such as [CLS] and [SEP]
DEFAULT_RESERVED_TOKENS = 10
# Conservative estimate; real English averages closer to 4
DEFAULT_CHARS_PER_TOKEN = 3


def l2_normalize(vector) -> np.ndarray:
    """
    Scale a vector to unit Euclidean length.

    Raises:
        EmbeddingError: if the vector is empty, not 1-D, contains non-finite
            values or has zero norm
    """
    try:
        arr = np.asarray(vector, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise EmbeddingError(f"Provider returned a non-numeric vector: {e}") from e
    if arr.ndim != 1 or arr.size == 0:
        raise EmbeddingError(f"Provider returned a vector of shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise EmbeddingError("Provider returned a vector with non-finite values")
    norm = float(np.linalg.norm(arr))
    if norm == 0.0 or not np.isfinite(norm):
        raise EmbeddingError(f"Cannot normalize vector with norm {norm}")
    return (arr / norm).astype(np.float32)


class EmbeddingAdapter:
    """Truncates, embeds and normalizes text through an EmbeddingProvider."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        reserved_tokens: int = DEFAULT_RESERVED_TOKENS,
        chars_per_token: int = DEFAULT_CHARS_PER_TOKEN,
    ):
        self.provider = provider
        self.reserved_tokens = reserved_tokens
        self.chars_per_token = chars_per_token

    @property
    def spec(self) -> EmbedderSpec:
        return self.provider.spec

    @property
    def max_chars(self) -> int:
        """Character budget derived from the provider's token window"""
        budget_tokens = max(int(self.provider.max_tokens) - self.reserved_tokens, 1)
        return budget_tokens * self.chars_per_token

    def truncate(self, text: str) -> str:
        """
        Cut item text to the character budget.

        Callers truncate before computing cache keys so that a key always
        names the text that was actually embedded.
        """
        limit = self.max_chars
        if len(text) > limit:
            logger.debug(f"Truncating text from {len(text)} to {limit} characters")
            return text[:limit]
        return text

    def embed(self, text: str, max_length: Optional[int] = None) -> np.ndarray:
        """
        Embed a single text as a unit-length float32 vector.

        The text is passed on as given; items are cut with `truncate` before
        they get here, prompts are not and the model caps their tokens.

        Args:
            text: Normalized text
            max_length: Maximum input length in characters declared to the
                provider (defaults to the length of `text`)

        Raises:
            EmbeddingError: if the provider fails or returns a degenerate vector
        """
        if max_length is None:
            max_length = len(text)
        try:
            raw = self.provider.embed(text, max_length)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Embedding provider failed: {e}") from e
        if raw is None:
            raise EmbeddingError("Embedding provider returned no vector")
        return l2_normalize(raw)
