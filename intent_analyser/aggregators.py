"""
Aggregators for grouping matches into a report
"""

from typing import Iterable

from intent_core.types import Category, Match, Priority, Report


class PriorityAggregator:
    """Groups matches by category, then by priority bucket"""

    def __init__(self, name: str = "priority"):
        self.name = name

    def aggregate(self, matches: Iterable[Match]) -> Report:
        """
        Partition matches into a report.

        The partition is stable: within a bucket, names keep the order in
        which matches were given. No secondary sort (e.g. by similarity) is
        applied. Unknown or missing priorities land in the medium bucket.
        """
        report = Report()
        for match in matches:
            report.add(
                Category.from_value(match.category),
                Priority.from_value(match.priority),
                match.name,
            )
        return report
