#!/usr/bin/env python3
"""
Intent Matching App

Matches a user prompt against skill and agent descriptions by embedding
similarity and prints the activation check for the items that match.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from intent_core.exceptions import ConfigurationError, EmbeddingError
from intent_core.layout import CacheLayout, default_cache_root
from intent_core.stores import EmbeddingCache
from intent_analyser.config import DEFAULT_THRESHOLD, load_config
from intent_analyser.loaders import load_items
from intent_analyser.pipeline import IntentMatchingPipeline
from intent_analyser.report_generator import OUTPUT_TYPES, ActivationReportGenerator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intent-classifier",
        description="Match a prompt against skills and agents by semantic similarity"
    )
    parser.add_argument(
        "--prompt",
        type=str,
        help="User prompt to match against (required)"
    )
    parser.add_argument(
        "--embed",
        type=Path,
        help="File or directory to embed and match (required)"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help=f"Similarity threshold, 0.0-1.0 (default: {DEFAULT_THRESHOLD})"
    )
    parser.add_argument(
        "--embedding-model",
        type=str,
        default=None,
        help="Sentence-transformers model name or local path (default: all-MiniLM-L6-v2)"
    )
    parser.add_argument(
        "--output-type",
        choices=OUTPUT_TYPES,
        default=None,
        help="Output type: auto, skills, or agents (default: auto)"
    )
    parser.add_argument(
        "--device",
        type=str,
        default=None,
        help="Torch device: cpu, cuda, mps (default: auto-detect)"
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=None,
        help="Cache root directory (default: platform user cache directory)"
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not read or write cached embeddings"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of items embedded concurrently (default: 1)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report and matches as JSON"
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while matching"
    )
    parser.add_argument(
        "--cache-stats",
        action="store_true",
        help="Print embedding cache statistics and exit"
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="Delete all cached embeddings and exit"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)"
    )
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(args.config)
        config.update(
            threshold=args.threshold,
            embedding_model=args.embedding_model,
            output_type=args.output_type,
            device=args.device,
            cache_dir=args.cache_dir,
            max_workers=args.workers,
        )
        if args.no_cache:
            config.use_cache = False
        if args.progress:
            config.show_progress = True
        config.validate()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.cache_stats or args.clear_cache:
        cache = EmbeddingCache(CacheLayout(config.cache_dir or default_cache_root()))
        if args.clear_cache:
            removed = cache.clear()
            print(f"Cleared {removed} cached embeddings from {cache.directory}")
        else:
            print(json.dumps(cache.stats(), indent=2))
        return 0

    if not args.prompt or args.embed is None:
        print("Error: --prompt and --embed are required", file=sys.stderr)
        print("", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    try:
        items = load_items(args.embed)
    except OSError as e:
        print(f"Failed to load items: {e}", file=sys.stderr)
        return 1

    try:
        pipeline = IntentMatchingPipeline(config)
        result = pipeline.run(args.prompt, items)
    except EmbeddingError as e:
        # Model load failures surface here as well as prompt failures
        print(f"Error: {e}", file=sys.stderr)
        return 1

    generator = ActivationReportGenerator(config.output_type)
    if args.json:
        print(generator.generate_json(result.report, result.matches))
    elif result.matches:
        sys.stdout.write(generator.generate_text(result.report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
