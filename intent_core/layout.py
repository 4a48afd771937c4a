"""
File layout for the per-user cache directory

Cache structure:
{cache_root}/
├── embeddings/
│   └── {embedder_key}/
│       └── {sha256}.cache   # little-endian float32 vector
└── models/                  # model weights downloaded by the embedder
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

APP_DIR_NAME = "intent-classifier"
CACHE_DIR_ENV = "INTENT_CLASSIFIER_CACHE_DIR"

EMBEDDINGS_NAMESPACE = "embeddings"
MODELS_NAMESPACE = "models"


def default_cache_root(environ: Optional[Mapping[str, str]] = None, platform: Optional[str] = None) -> Path:
    """
    Resolve the platform-appropriate per-user cache root.

    Args:
        environ: Environment mapping (defaults to os.environ)
        platform: Platform string as in sys.platform (defaults to the current one)

    Returns:
        Path of the intent-classifier cache root (not created)
    """
    env = os.environ if environ is None else environ
    platform = platform or sys.platform

    override = env.get(CACHE_DIR_ENV)
    if override:
        return Path(override)

    if platform.startswith("win"):
        local_app_data = env.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / APP_DIR_NAME
        return Path(env.get("USERPROFILE", "")) / "AppData" / "Local" / APP_DIR_NAME

    xdg_cache = env.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / APP_DIR_NAME
    return Path(env.get("HOME", str(Path.home()))) / ".cache" / APP_DIR_NAME


@dataclass
class CacheLayout:
    """Paths under the cache root, one namespace per cache class"""
    cache_root: Path

    @classmethod
    def default(cls) -> "CacheLayout":
        return cls(default_cache_root())

    def embeddings_dir(self, namespace: Optional[str] = None) -> Path:
        """Get the directory holding embedding vectors, optionally per embedder"""
        base = self.cache_root / EMBEDDINGS_NAMESPACE
        return base / namespace if namespace else base

    def models_dir(self) -> Path:
        return self.cache_root / MODELS_NAMESPACE

    def ensure_dirs(self) -> None:
        self.embeddings_dir().mkdir(parents=True, exist_ok=True)
        self.models_dir().mkdir(parents=True, exist_ok=True)
