"""
Intent Analyser - Semantic matching of prompts against skills and agents
"""

# Text normalization
from .normalizer import normalize, prepare_text

# Embedders
from .embedders.adapter import EmbeddingAdapter
from .embedders.sentence_transformer_embedder import SentenceTransformerEmbedder

# Matching and aggregation
from .matcher import IntentMatcher, cosine_similarity
from .aggregators import PriorityAggregator

# Loading and reporting
from .loaders import load_items, extract_metadata
from .report_generator import ActivationReportGenerator

# Configuration and pipeline
from .config import MatcherConfig, load_config
from .pipeline import IntentMatchingPipeline, MatchingResult

__all__ = [
    # Normalization
    "normalize",
    "prepare_text",

    # Embedders
    "EmbeddingAdapter",
    "SentenceTransformerEmbedder",

    # Matching
    "IntentMatcher",
    "cosine_similarity",
    "PriorityAggregator",

    # Loading and reporting
    "load_items",
    "extract_metadata",
    "ActivationReportGenerator",

    # Configuration and pipeline
    "MatcherConfig",
    "load_config",
    "IntentMatchingPipeline",
    "MatchingResult",
]
