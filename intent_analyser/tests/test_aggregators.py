"""
Tests for match aggregation
"""

from intent_core.types import Category, Match, Priority
from intent_analyser.aggregators import PriorityAggregator


def _match(name, priority="medium", category="skill", similarity=0.5):
    return Match(name=name, path=f"/{category}s/{name}.md", similarity=similarity,
                 priority=priority, category=category)


class TestPriorityAggregator:
    """Test grouping of matches by category and priority"""

    def test_empty_matches(self):
        """Test no matches give an empty report"""
        report = PriorityAggregator().aggregate([])
        assert report.is_empty
        assert report.categories == []

    def test_partitions_by_category_and_priority(self):
        """Test matches land in their category and priority bucket"""
        matches = [
            _match("code-review", "critical", "skill"),
            _match("deployer", "high", "agent"),
            _match("linter", "low", "skill"),
        ]
        report = PriorityAggregator().aggregate(matches)

        skill_buckets = dict(report.buckets(Category.SKILL))
        agent_buckets = dict(report.buckets(Category.AGENT))
        assert skill_buckets[Priority.CRITICAL] == ["code-review"]
        assert skill_buckets[Priority.LOW] == ["linter"]
        assert skill_buckets[Priority.HIGH] == []
        assert agent_buckets[Priority.HIGH] == ["deployer"]
        assert report.categories == [Category.SKILL, Category.AGENT]

    def test_order_within_bucket_is_input_order(self):
        """Test buckets keep input order, not similarity order"""
        # Similarity must not reorder a bucket
        matches = [
            _match("first", "high", similarity=0.41),
            _match("second", "high", similarity=0.99),
            _match("third", "high", similarity=0.70),
        ]
        report = PriorityAggregator().aggregate(matches)
        assert dict(report.buckets(Category.SKILL))[Priority.HIGH] == ["first", "second", "third"]

    def test_unknown_priority_goes_to_medium(self):
        """Test garbled priorities default to medium"""
        matches = [_match("odd", "urgent!!"), _match("blank", ""), _match("upper", "HIGH")]
        buckets = dict(PriorityAggregator().aggregate(matches).buckets(Category.SKILL))
        assert buckets[Priority.MEDIUM] == ["odd", "blank"]
        assert buckets[Priority.HIGH] == ["upper"]

    def test_unknown_category_is_skill(self):
        """Test an unknown category is treated as a skill"""
        report = PriorityAggregator().aggregate([_match("tool", category="command")])
        assert report.categories == [Category.SKILL]
        assert report.names(Category.SKILL) == ["tool"]

    def test_every_match_lands_in_exactly_one_bucket(self):
        """Test the partition neither drops nor duplicates matches"""
        matches = [_match(f"m{i}", p, c) for i, (p, c) in enumerate([
            ("critical", "skill"), ("high", "agent"), ("medium", "skill"),
            ("low", "agent"), ("bogus", "agent"), ("low", "skill"),
        ])]
        report = PriorityAggregator().aggregate(matches)
        names = report.names(Category.SKILL) + report.names(Category.AGENT)
        assert sorted(names) == sorted(m.name for m in matches)

    def test_to_dict(self):
        """Test the serializable form of a report"""
        report = PriorityAggregator().aggregate([_match("deployer", "critical", "agent")])
        assert report.to_dict() == {
            "agent": {"critical": ["deployer"], "high": [], "medium": [], "low": []},
        }
