"""
End-to-end tests for the matching pipeline
"""

import pytest

from intent_core.types import Category, Priority
from intent_analyser.config import MatcherConfig
from intent_analyser.embedders.sentence_transformer_embedder import SentenceTransformerEmbedder
from intent_analyser.pipeline import IntentMatchingPipeline


@pytest.fixture
def config(tmp_path):
    return MatcherConfig(cache_dir=tmp_path / "cache", threshold=0.4)


class TestIntentMatchingPipeline:
    """Test the full Normalize → Embed/Cache → Match → Aggregate flow"""

    def test_end_to_end(self, config, make_provider, sample_items, sample_prompt):
        """Test matches and report for the sample corpus"""
        pipeline = IntentMatchingPipeline(config, provider=make_provider())
        result = pipeline.run(sample_prompt, sample_items)

        assert [m.name for m in result.matches] == ["code-review", "python-testing"]
        buckets = dict(result.report.buckets(Category.SKILL))
        assert buckets[Priority.CRITICAL] == ["code-review"]
        assert buckets[Priority.LOW] == ["python-testing"]
        assert not result.report.has_category(Category.AGENT)
        assert result.stats["matched"] == 2

    def test_cache_is_namespaced_by_model(self, config, make_provider, sample_items, sample_prompt):
        """Test cache entries live under the model key"""
        provider = make_provider()
        pipeline = IntentMatchingPipeline(config, provider=provider)
        pipeline.run(sample_prompt, sample_items)

        expected = config.cache_dir / "embeddings" / provider.spec.key()
        assert pipeline.cache.directory == expected
        assert len(list(expected.glob("*.cache"))) == len(sample_items)

    def test_different_models_do_not_share_vectors(self, config, make_provider, sample_items, sample_prompt):
        """Test another model never reads cached vectors"""
        IntentMatchingPipeline(config, provider=make_provider(dim=512)).run(sample_prompt, sample_items)

        other = IntentMatchingPipeline(config, provider=make_provider(dim=256))
        result = other.run(sample_prompt, sample_items)

        assert result.stats["cache_hits"] == 0
        assert result.stats["embedded"] == len(sample_items)

    def test_second_run_uses_cache(self, config, make_provider, sample_items, sample_prompt):
        """Test a second pipeline reuses cached vectors"""
        provider = make_provider()
        IntentMatchingPipeline(config, provider=provider).run(sample_prompt, sample_items)
        result = IntentMatchingPipeline(config, provider=provider).run(sample_prompt, sample_items)

        assert result.stats["cache_hits"] == len(sample_items)
        assert [m.name for m in result.matches] == ["code-review", "python-testing"]

    def test_cache_disabled(self, config, make_provider, sample_items, sample_prompt):
        """Test nothing is written with caching off"""
        config.use_cache = False
        pipeline = IntentMatchingPipeline(config, provider=make_provider())
        result = pipeline.run(sample_prompt, sample_items)

        assert pipeline.cache is None
        assert len(result.matches) == 2
        assert not (config.cache_dir / "embeddings").exists()

    def test_concurrent_run_matches_sequential(self, config, make_provider, sample_items, sample_prompt):
        """Test worker pool results equal sequential ones"""
        config.max_workers = 3
        result = IntentMatchingPipeline(config, provider=make_provider()).run(sample_prompt, sample_items)
        assert [m.name for m in result.matches] == ["code-review", "python-testing"]

    def test_invalid_config_is_rejected(self, config, make_provider):
        """Test an invalid config is rejected at construction"""
        config.threshold = 3.0
        with pytest.raises(ValueError):
            IntentMatchingPipeline(config, provider=make_provider())

    def test_default_provider_is_lazy(self, config):
        """Test the default provider is built without loading"""
        config.embedding_model = "some-local-model"
        pipeline = IntentMatchingPipeline(config)

        assert isinstance(pipeline.provider, SentenceTransformerEmbedder)
        assert pipeline.provider.model_name == "some-local-model"
        assert pipeline.provider.cache_folder == str(config.cache_dir / "models")
