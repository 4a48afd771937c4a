"""
Semantic matching of a prompt against items
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
from tqdm import tqdm

from intent_core.exceptions import CacheIOError, EmbeddingError
from intent_core.stores import EmbeddingCache
from intent_core.types import Item, Match

from .embedders.adapter import EmbeddingAdapter
from .normalizer import prepare_text

logger = logging.getLogger(__name__)


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """
    Cosine similarity of two unit-length vectors.

    Both vectors are normalized when they are produced, so the dot product
    is the cosine. Vectors of different dimensionality (e.g. cache entries
    from another model) score 0.0 rather than failing.
    """
    a = np.asarray(a, dtype=np.float32)
    b = np.asarray(b, dtype=np.float32)
    if a.shape != b.shape:
        return 0.0
    return float(np.dot(a, b))


class IntentMatcher:
    """
    Matches a prompt against items by embedding similarity.

    Item vectors come from the cache when present and are embedded and
    stored otherwise. Prompt vectors are never cached. Failures for a single
    item are logged and the item is skipped.
    """

    def __init__(
        self,
        adapter: EmbeddingAdapter,
        cache: Optional[EmbeddingCache] = None,
        max_workers: int = 1,
        show_progress: bool = False,
    ):
        """
        Args:
            adapter: Embedding adapter wrapping the provider
            cache: Embedding cache, or None to always embed
            max_workers: Number of items processed concurrently
            show_progress: Show a tqdm progress bar over items
        """
        self.adapter = adapter
        self.cache = cache
        self.max_workers = max(1, int(max_workers))
        self.show_progress = show_progress
        self._stats_lock = threading.Lock()
        self._stats: Dict[str, int] = {}
        self._reset_stats()

    def _reset_stats(self) -> None:
        self._stats = {
            "total_items": 0,
            "cache_hits": 0,
            "embedded": 0,
            "skipped": 0,
            "matched": 0,
        }

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self._stats[key] += 1

    def get_stats(self) -> Dict[str, Any]:
        with self._stats_lock:
            return dict(self._stats)

    def embed_prompt(self, prompt: str) -> np.ndarray:
        """
        Embed the user prompt.

        Prompts are not truncated: the model caps the tokens it reads.

        Raises:
            EmbeddingError: the run cannot continue without a prompt vector
        """
        try:
            return self.adapter.embed(prepare_text(prompt))
        except EmbeddingError as e:
            raise EmbeddingError(f"Failed to embed prompt: {e}") from e

    def item_vector(self, item: Item) -> Optional[np.ndarray]:
        """
        Get the vector for an item from the cache, embedding it on a miss.

        Returns:
            The unit-length vector, or None if the item could not be embedded
        """
        text = self.adapter.truncate(prepare_text(item.content))

        if self.cache is not None:
            vector, found = self.cache.get(text)
            if found:
                self._count("cache_hits")
                return vector

        try:
            vector = self.adapter.embed(text, self.adapter.max_chars)
        except EmbeddingError as e:
            logger.warning(f"Failed to embed {item.name}: {e}")
            return None
        self._count("embedded")

        if self.cache is not None:
            try:
                self.cache.put(text, vector)
            except CacheIOError as e:
                logger.warning(f"Failed to cache embedding for {item.name}: {e}")
        return vector

    def _score(self, prompt_vector: np.ndarray, item: Item, threshold: float) -> Optional[Match]:
        vector = self.item_vector(item)
        if vector is None:
            self._count("skipped")
            return None

        similarity = cosine_similarity(prompt_vector, vector)
        logger.debug(f"{item.name}: similarity {similarity:.4f}")
        if similarity < threshold:
            return None

        self._count("matched")
        return Match(
            name=item.name,
            path=item.path,
            similarity=similarity,
            priority=item.priority,
            category=item.category,
        )

    def match(self, prompt_vector: np.ndarray, items: Iterable[Item], threshold: float) -> List[Match]:
        """
        Score every item against the prompt vector.

        Args:
            prompt_vector: Unit-length prompt embedding
            items: Items to match
            threshold: Inclusive similarity threshold

        Returns:
            Matches in item input order, also when items are processed
            concurrently
        """
        items = list(items)
        self._reset_stats()
        self._stats["total_items"] = len(items)
        results: List[Optional[Match]] = [None] * len(items)

        progress_bar = tqdm(total=len(items), desc="Matching items", disable=not self.show_progress)
        try:
            if self.max_workers == 1 or len(items) <= 1:
                for index, item in enumerate(items):
                    results[index] = self._score(prompt_vector, item, threshold)
                    progress_bar.update(1)
            else:
                with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                    future_to_index = {
                        executor.submit(self._score, prompt_vector, item, threshold): index
                        for index, item in enumerate(items)
                    }
                    for future in as_completed(future_to_index):
                        results[future_to_index[future]] = future.result()
                        progress_bar.update(1)
        finally:
            progress_bar.close()

        matches = [m for m in results if m is not None]
        stats = self.get_stats()
        logger.info(
            f"Matched {stats['matched']}/{stats['total_items']} items "
            f"({stats['cache_hits']} cached, {stats['embedded']} embedded, {stats['skipped']} skipped)"
        )
        return matches

    def run(self, prompt: str, items: Iterable[Item], threshold: float) -> List[Match]:
        """Embed the prompt and match it against items"""
        prompt_vector = self.embed_prompt(prompt)
        return self.match(prompt_vector, items, threshold)
