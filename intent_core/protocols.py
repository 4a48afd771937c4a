"""
Algorithmic protocols shared across packages.
"""

from typing import Protocol, runtime_checkable

import numpy as np

from intent_core.types import EmbedderSpec


@runtime_checkable
class EmbeddingProvider(Protocol):
    """An opaque text -> fixed-length vector function.

    `max_tokens` is the model's context window in tokens. `embed` receives
    text already truncated to fit and the declared maximum input length in
    characters; dimensionality is fixed for the lifetime of the provider.
    Implementations must not share mutable encoder state between
    concurrent calls.
    """

    @property
    def spec(self) -> EmbedderSpec: ...

    @property
    def max_tokens(self) -> int: ...

    def embed(self, text: str, max_length: int) -> np.ndarray: ...
