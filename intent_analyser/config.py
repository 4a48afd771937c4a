"""Configuration helpers for intent matching."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from intent_core.exceptions import ConfigurationError
from intent_core.layout import CACHE_DIR_ENV

from .embedders.adapter import DEFAULT_CHARS_PER_TOKEN, DEFAULT_RESERVED_TOKENS
from .embedders.sentence_transformer_embedder import DEFAULT_MODEL_NAME
from .report_generator import OUTPUT_TYPES

DEFAULT_THRESHOLD = 0.4
DEFAULT_WORKERS = 1

MODEL_ENV = "INTENT_CLASSIFIER_MODEL"
THRESHOLD_ENV = "INTENT_CLASSIFIER_THRESHOLD"
WORKERS_ENV = "INTENT_CLASSIFIER_WORKERS"


@dataclass
class MatcherConfig:
    """Typed configuration for a matching run."""

    embedding_model: str = DEFAULT_MODEL_NAME
    model_revision: Optional[str] = None
    device: Optional[str] = None
    threshold: float = DEFAULT_THRESHOLD
    output_type: str = "auto"
    cache_dir: Optional[Path] = None  # None = platform default (see intent_core.layout)
    use_cache: bool = True
    namespace_by_model: bool = True  # Keep vectors of different models apart
    max_workers: int = DEFAULT_WORKERS
    reserved_tokens: int = DEFAULT_RESERVED_TOKENS
    chars_per_token: int = DEFAULT_CHARS_PER_TOKEN
    show_progress: bool = False

    def validate(self) -> None:
        """Raise ConfigurationError for values the matcher does not recover from."""
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(f"threshold must be within [0, 1], got {self.threshold}")
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.output_type not in OUTPUT_TYPES:
            raise ConfigurationError(
                f"Unsupported output_type '{self.output_type}'. Expected one of {', '.join(OUTPUT_TYPES)}."
            )
        if self.chars_per_token < 1:
            raise ConfigurationError(f"chars_per_token must be >= 1, got {self.chars_per_token}")
        if self.reserved_tokens < 0:
            raise ConfigurationError(f"reserved_tokens must be >= 0, got {self.reserved_tokens}")

    def update(self, **overrides: Any) -> "MatcherConfig":
        """Apply non-None overrides in place (e.g. from command-line flags)."""
        known = {f.name for f in fields(self)}
        for key, value in overrides.items():
            if key not in known:
                raise ConfigurationError(f"Unknown configuration key '{key}'")
            if value is not None:
                setattr(self, key, value)
        return self


def _as_path(value: Optional[Any]) -> Optional[Path]:
    if value in (None, ""):
        return None
    return Path(value).expanduser()


def _as_float(key: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from e


def _as_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


def apply_mapping(config: MatcherConfig, data: Mapping[str, Any]) -> MatcherConfig:
    """Copy recognised keys from a YAML mapping onto the config."""
    if "embedding_model" in data:
        config.embedding_model = str(data["embedding_model"])
    if "model_revision" in data:
        config.model_revision = str(data["model_revision"]) if data["model_revision"] else None
    if "device" in data:
        config.device = str(data["device"]) if data["device"] else None
    if "threshold" in data:
        config.threshold = _as_float("threshold", data["threshold"])
    if "output_type" in data:
        config.output_type = str(data["output_type"]).strip().lower()
    if "cache_dir" in data:
        config.cache_dir = _as_path(data["cache_dir"])
    if "use_cache" in data:
        config.use_cache = bool(data["use_cache"])
    if "namespace_by_model" in data:
        config.namespace_by_model = bool(data["namespace_by_model"])
    if "max_workers" in data:
        config.max_workers = _as_int("max_workers", data["max_workers"])
    if "reserved_tokens" in data:
        config.reserved_tokens = _as_int("reserved_tokens", data["reserved_tokens"])
    if "chars_per_token" in data:
        config.chars_per_token = _as_int("chars_per_token", data["chars_per_token"])
    if "show_progress" in data:
        config.show_progress = bool(data["show_progress"])
    return config


def apply_environment(config: MatcherConfig, environ: Optional[Mapping[str, str]] = None) -> MatcherConfig:
    """Override config values from INTENT_CLASSIFIER_* environment variables."""
    env = os.environ if environ is None else environ
    if env.get(MODEL_ENV):
        config.embedding_model = env[MODEL_ENV]
    if env.get(THRESHOLD_ENV):
        config.threshold = _as_float(THRESHOLD_ENV, env[THRESHOLD_ENV])
    if env.get(WORKERS_ENV):
        config.max_workers = _as_int(WORKERS_ENV, env[WORKERS_ENV])
    if env.get(CACHE_DIR_ENV):
        config.cache_dir = _as_path(env[CACHE_DIR_ENV])
    return config


def load_config(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> MatcherConfig:
    """
    Load configuration from defaults, an optional YAML file and the environment.

    A `.env` file in the working directory is read first when no explicit
    environment mapping is given. Environment values take precedence over
    the YAML file.
    """
    if environ is None:
        load_dotenv()

    config = MatcherConfig()
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        data: Dict[str, Any] = payload or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping at the top of {path}")
        apply_mapping(config, data)

    return apply_environment(config, environ)
