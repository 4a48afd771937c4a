"""
Intent Analyser - Matching pipeline (Normalize → Embed/Cache → Match → Aggregate)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from intent_core.layout import CacheLayout, default_cache_root
from intent_core.protocols import EmbeddingProvider
from intent_core.stores import EmbeddingCache
from intent_core.types import Item, Match, Report

from .aggregators import PriorityAggregator
from .config import MatcherConfig
from .embedders.adapter import EmbeddingAdapter
from .embedders.sentence_transformer_embedder import SentenceTransformerEmbedder
from .matcher import IntentMatcher

logger = logging.getLogger(__name__)


@dataclass
class MatchingResult:
    """Matches of a run and their grouped report."""
    matches: List[Match]
    report: Report
    stats: Dict[str, Any] = field(default_factory=dict)


class IntentMatchingPipeline:
    """
    Wires provider, cache, matcher and aggregator from a MatcherConfig.

    The cache store is built explicitly per pipeline, rooted at
    `config.cache_dir` or the platform default, so tests can point each
    pipeline at its own temporary directory.
    """

    def __init__(self, config: MatcherConfig, provider: Optional[EmbeddingProvider] = None):
        config.validate()
        self.config = config
        self.layout = CacheLayout(config.cache_dir or default_cache_root())
        if provider is None:
            provider = SentenceTransformerEmbedder(
                model_name=config.embedding_model,
                revision=config.model_revision,
                lazy_load=True,
                device=config.device,
                cache_folder=self.layout.models_dir(),
            )
        self.provider = provider
        self.adapter = EmbeddingAdapter(
            provider,
            reserved_tokens=config.reserved_tokens,
            chars_per_token=config.chars_per_token,
        )
        self.aggregator = PriorityAggregator()
        self._cache: Optional[EmbeddingCache] = None
        self._matcher: Optional[IntentMatcher] = None

    @property
    def cache(self) -> Optional[EmbeddingCache]:
        """Embedding cache for this run's model, or None when caching is off"""
        if not self.config.use_cache:
            return None
        if self._cache is None:
            spec = self.adapter.spec
            namespace = spec.key() if self.config.namespace_by_model else None
            self._cache = EmbeddingCache(self.layout, namespace=namespace, dim=spec.dim)
        return self._cache

    @property
    def matcher(self) -> IntentMatcher:
        if self._matcher is None:
            self._matcher = IntentMatcher(
                self.adapter,
                cache=self.cache,
                max_workers=self.config.max_workers,
                show_progress=self.config.show_progress,
            )
        return self._matcher

    def run(self, prompt: str, items: Iterable[Item]) -> MatchingResult:
        """
        Match a prompt against items and group the matches.

        Raises:
            EmbeddingError: if the prompt itself cannot be embedded
        """
        matches = self.matcher.run(prompt, items, self.config.threshold)
        report = self.aggregator.aggregate(matches)
        return MatchingResult(matches=matches, report=report, stats=self.matcher.get_stats())
