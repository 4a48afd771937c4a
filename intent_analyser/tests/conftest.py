"""
Pytest configuration and fixtures for intent_analyser tests
"""

import threading

import numpy as np
import pytest

from intent_core.layout import CacheLayout
from intent_core.stores import EmbeddingCache
from intent_core.types import EmbedderSpec, Item
from intent_analyser.embedders.adapter import EmbeddingAdapter


class MockProvider:
    """Bag-of-words provider: every distinct token gets its own axis.

    Texts sharing no token are exactly orthogonal, so similarities in
    tests are predictable without a real model.
    """

    def __init__(self, dim: int = 512, max_tokens: int = 128):
        self.dim = dim
        self._max_tokens = max_tokens
        self._vocabulary = {}
        self._lock = threading.Lock()
        self.calls = []

    @property
    def spec(self) -> EmbedderSpec:
        return EmbedderSpec("mock_provider", self.dim)

    @property
    def max_tokens(self) -> int:
        return self._max_tokens

    def _index(self, token: str) -> int:
        with self._lock:
            if token not in self._vocabulary:
                self._vocabulary[token] = len(self._vocabulary) % self.dim
            return self._vocabulary[token]

    def embed(self, text: str, max_length: int) -> np.ndarray:
        with self._lock:
            self.calls.append(text)
        vector = np.zeros(self.dim, dtype=np.float32)
        for token in text[:max_length].split():
            vector[self._index(token)] += 1.0
        return vector


class FailingProvider(MockProvider):
    """Provider that fails for texts containing a marker token"""

    def __init__(self, marker: str = "broken", **kwargs):
        super().__init__(**kwargs)
        self.marker = marker

    def embed(self, text: str, max_length: int) -> np.ndarray:
        if self.marker in text.split():
            raise RuntimeError("model exploded")
        return super().embed(text, max_length)


@pytest.fixture
def provider():
    return MockProvider()


@pytest.fixture
def adapter(provider):
    return EmbeddingAdapter(provider)


@pytest.fixture
def cache(tmp_path):
    """Isolated embedding cache rooted in a temporary directory"""
    return EmbeddingCache(CacheLayout(tmp_path / "cache"))


@pytest.fixture
def sample_items():
    """Three items: strong, no and moderate overlap with `sample_prompt`"""
    return [
        Item(
            name="code-review",
            path="/skills/code-review/SKILL.md",
            content="---\nname: code-review\npriority: critical\n---\nReview Python code quality and style",
            priority="critical",
            category="skill",
        ),
        Item(
            name="k8s-deployer",
            path="/agents/k8s-deployer.md",
            content="---\nname: k8s-deployer\n---\nDeploy kubernetes clusters to cloud infrastructure",
            priority="medium",
            category="agent",
        ),
        Item(
            name="python-testing",
            path="/skills/python-testing/SKILL.md",
            content="---\nname: python-testing\npriority: low\n---\nPython code testing",
            priority="low",
            category="skill",
        ),
    ]


@pytest.fixture
def sample_prompt():
    return "Please review the Python code quality"


@pytest.fixture
def skills_tree(tmp_path):
    """Directory of skill and agent files on disk"""
    root = tmp_path / "claude"
    (root / "skills" / "code-review").mkdir(parents=True)
    (root / "agents").mkdir(parents=True)

    (root / "skills" / "code-review" / "SKILL.md").write_text(
        "---\nname: code-review\npriority: critical\n---\nReview Python code quality and style\n",
        encoding="utf-8",
    )
    (root / "skills" / "notes.md").write_text(
        "Python code testing\n",
        encoding="utf-8",
    )
    (root / "agents" / "deployer.md").write_text(
        "---\nname: \"k8s-deployer\"\npriority: 'high'\n---\nDeploy kubernetes clusters to cloud infrastructure\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def make_provider():
    """Factory for mock providers with custom dimension or token window"""
    return MockProvider


@pytest.fixture
def failing_provider():
    """Provider failing for any text containing the token 'broken'"""
    return FailingProvider()
