"""
Shared domain types and model specifications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple
import json
import hashlib


class Priority(str, Enum):
    """Declared priority of an item, used to bucket matches for display."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "Priority":
        """Parse a priority, defaulting to MEDIUM for anything unrecognised"""
        if value is None:
            return cls.MEDIUM
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM


PRIORITY_ORDER: Tuple[Priority, ...] = (
    Priority.CRITICAL,
    Priority.HIGH,
    Priority.MEDIUM,
    Priority.LOW,
)


class Category(str, Enum):
    """Kind of item: a skill or an agent."""
    SKILL = "skill"
    AGENT = "agent"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "Category":
        if value is not None and str(value).strip().lower() == cls.AGENT.value:
            return cls.AGENT
        return cls.SKILL


CATEGORY_ORDER: Tuple[Category, ...] = (Category.SKILL, Category.AGENT)


@dataclass(frozen=True)
class Item:
    """A candidate document (skill or agent description) loaded from disk.

    `priority` and `category` keep the raw values read from metadata; they
    are only coerced to enums when matches are aggregated.
    """
    name: str
    path: str
    content: str
    priority: str = Priority.MEDIUM.value
    category: str = Category.SKILL.value


@dataclass
class Match:
    """An item whose similarity to the prompt reached the threshold."""
    name: str
    path: str
    similarity: float
    priority: str
    category: str


def _empty_buckets() -> Dict[Priority, List[str]]:
    return {priority: [] for priority in PRIORITY_ORDER}


@dataclass
class Report:
    """Match names grouped by category, then by priority bucket.

    Every category present in `sections` carries all four buckets so a
    renderer can walk it without further logic.
    """
    sections: Dict[Category, Dict[Priority, List[str]]] = field(default_factory=dict)

    def add(self, category: Category, priority: Priority, name: str) -> None:
        self.sections.setdefault(category, _empty_buckets())[priority].append(name)

    @property
    def categories(self) -> List[Category]:
        """Categories holding at least one name, skills first"""
        return [c for c in CATEGORY_ORDER if self.has_category(c)]

    @property
    def is_empty(self) -> bool:
        return not self.categories

    def has_category(self, category: Category) -> bool:
        buckets = self.sections.get(category)
        return bool(buckets) and any(buckets.values())

    def buckets(self, category: Category) -> Iterator[Tuple[Priority, List[str]]]:
        """Yield (priority, names) pairs in fixed display order"""
        buckets = self.sections.get(category) or _empty_buckets()
        for priority in PRIORITY_ORDER:
            yield priority, list(buckets.get(priority, []))

    def names(self, category: Category) -> List[str]:
        return [name for _, names in self.buckets(category) for name in names]

    def to_dict(self) -> Dict[str, Dict[str, List[str]]]:
        return {
            category.value: {priority.value: names for priority, names in self.buckets(category)}
            for category in self.categories
        }


@dataclass(frozen=True)
class EmbedderSpec:
    model_name: str
    dim: int
    revision: Optional[str] = None

    def key(self) -> str:
        s = json.dumps({"model": self.model_name, "dim": self.dim, "rev": self.revision}, sort_keys=True)
        return hashlib.sha1(s.encode()).hexdigest()[:12]

    def to_dict(self) -> Dict[str, Any]:
        return {"model_name": self.model_name, "dim": self.dim, "revision": self.revision}
