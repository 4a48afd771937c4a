import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np

from intent_core.exceptions import CacheIOError
from intent_core.layout import CacheLayout

logger = logging.getLogger(__name__)

# Fixed-width little-endian float32, independent of host byte order
VECTOR_DTYPE = np.dtype("<f4")
CACHE_SUFFIX = ".cache"


class EmbeddingCache:
    """Content-addressed store of embedding vectors.

    Entries are keyed by the SHA-256 of the normalized text, one file per
    digest. The store is append-only: entries are never expired or evicted
    while matching, and a corrupt entry reads as a miss and is overwritten
    by the next `put` for the same text.
    """

    def __init__(self, layout: CacheLayout, namespace: Optional[str] = None, dim: Optional[int] = None):
        """
        Args:
            layout: Cache directory layout
            namespace: Optional sub-namespace, typically the embedder spec key,
                so vectors from different models never mix
            dim: Expected vector dimension; entries of another size read as misses
        """
        self.layout = layout
        self.namespace = namespace
        self.dim = dim

    @property
    def directory(self) -> Path:
        return self.layout.embeddings_dir(self.namespace)

    @staticmethod
    def key(text: str) -> str:
        """Hex SHA-256 digest of the UTF-8 bytes of `text`"""
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    def path_for(self, text: str) -> Path:
        return self.directory / f"{self.key(text)}{CACHE_SUFFIX}"

    def get(self, text: str) -> Tuple[Optional[np.ndarray], bool]:
        """
        Look up the vector cached for a normalized text.

        Args:
            text: Normalized text, exactly as it was (or would be) embedded

        Returns:
            (vector, True) on a hit, (None, False) when the entry is absent,
            unreadable or corrupt
        """
        path = self.path_for(text)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None, False
        except OSError as e:
            logger.warning(f"Failed to read cached embedding {path}: {e}")
            return None, False

        if not data or len(data) % VECTOR_DTYPE.itemsize != 0:
            logger.debug(f"Ignoring corrupt cache entry {path} ({len(data)} bytes)")
            return None, False

        vector = np.frombuffer(data, dtype=VECTOR_DTYPE).astype(np.float32)
        if self.dim is not None and vector.shape[0] != self.dim:
            logger.debug(f"Ignoring cache entry {path}: dimension {vector.shape[0]} != {self.dim}")
            return None, False
        return vector, True

    def put(self, text: str, vector: np.ndarray) -> Path:
        """
        Store the vector for a normalized text.

        The payload is written to a temporary file in the target directory
        and renamed into place, so readers never see a partial record.
        Concurrent writers of the same key write identical bytes; the last
        rename wins.

        Raises:
            CacheIOError: if the entry cannot be written
        """
        arr = np.asarray(vector, dtype=VECTOR_DTYPE)
        if arr.ndim != 1:
            raise ValueError(f"Expected a 1-D vector, got shape {arr.shape}")

        path = self.path_for(text)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(arr.tobytes())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CacheIOError(f"Failed to write cached embedding {path}: {e}") from e
        return path

    def has_embedding(self, text: str) -> bool:
        return self.path_for(text).exists()

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        entries = 0
        size = 0
        if self.directory.exists():
            for cache_file in self.directory.rglob(f"*{CACHE_SUFFIX}"):
                if cache_file.is_file():
                    entries += 1
                    size += cache_file.stat().st_size
        return {
            "directory": str(self.directory),
            "total_entries": entries,
            "cache_size_bytes": size,
            "cache_size_mb": round(size / (1024 * 1024), 2),
        }

    def clear(self) -> int:
        """
        Remove every entry in this namespace, including nested namespaces.

        Only called on explicit user request; matching never removes entries.

        Returns:
            Number of entries removed
        """
        removed = 0
        if not self.directory.exists():
            return removed
        for cache_file in self.directory.rglob(f"*{CACHE_SUFFIX}"):
            cache_file.unlink()
            removed += 1
        logger.info(f"Cleared {removed} cached embeddings from {self.directory}")
        return removed
