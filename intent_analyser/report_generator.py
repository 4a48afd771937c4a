"""
Rendering of match reports for the terminal
"""

import json
from typing import Dict, List, Optional, Sequence

from intent_core.types import Category, Match, Priority, Report

RULE = "━" * 39

OUTPUT_TYPES = ("auto", "skills", "agents")

SECTION_HEADINGS: Dict[Priority, str] = {
    Priority.CRITICAL: "⚠️  CRITICAL {label} (REQUIRED):",
    Priority.HIGH: "📚 RECOMMENDED {label}:",
    Priority.MEDIUM: "💡 SUGGESTED {label}:",
    Priority.LOW: "📌 OPTIONAL {label}:",
}

CATEGORY_LABELS: Dict[Category, str] = {
    Category.SKILL: "SKILLS",
    Category.AGENT: "AGENTS",
}

CATEGORY_PREFIXES: Dict[Category, str] = {
    Category.SKILL: "",
    Category.AGENT: "@",
}


class ActivationReportGenerator:
    """Renders a Report as the skills/agents activation check banner."""

    def __init__(self, output_type: str = "auto"):
        """
        Args:
            output_type: "auto" renders every category present, "skills" or
                "agents" restrict the output to that category
        """
        if output_type not in OUTPUT_TYPES:
            raise ValueError(f"Unsupported output_type '{output_type}'. Expected one of {OUTPUT_TYPES}.")
        self.output_type = output_type

    def visible_categories(self, report: Report) -> List[Category]:
        categories = report.categories
        if self.output_type == "skills":
            return [c for c in categories if c == Category.SKILL]
        if self.output_type == "agents":
            return [c for c in categories if c == Category.AGENT]
        return categories

    def _title(self, categories: Sequence[Category]) -> str:
        if Category.SKILL in categories and Category.AGENT in categories:
            return "🎯 SKILLS & AGENTS ACTIVATION CHECK"
        if Category.AGENT in categories:
            return "🤖 AGENTS ACTIVATION CHECK"
        return "🎯 SKILLS ACTIVATION CHECK"

    def _section(self, report: Report, category: Category) -> List[str]:
        label = CATEGORY_LABELS[category]
        prefix = CATEGORY_PREFIXES[category]
        lines: List[str] = []
        for priority, names in report.buckets(category):
            if not names:
                continue
            lines.append(SECTION_HEADINGS[priority].format(label=label))
            lines.extend(f"  → {prefix}{name}" for name in names)
            lines.append("")
        return lines

    def _action(self, report: Report, categories: Sequence[Category]) -> Optional[str]:
        parts: List[str] = []
        if Category.SKILL in categories:
            parts.append("Use Skill tool")
        if Category.AGENT in categories:
            agents = [f"@{name}" for name in report.names(Category.AGENT)]
            if agents:
                parts.append("Use " + ", ".join(agents))
        if not parts:
            return None
        return "ACTION: " + " and ".join(parts)

    def generate_text(self, report: Report) -> str:
        """
        Render the report as text.

        Returns:
            The rendered banner, or an empty string when nothing is visible
        """
        categories = self.visible_categories(report)
        if not categories:
            return ""

        lines = [RULE, self._title(categories), RULE, ""]
        for i, category in enumerate(categories):
            if i > 0:
                lines.append("")
            lines.extend(self._section(report, category))

        action = self._action(report, categories)
        if action:
            lines.append(action)
        lines.append(RULE)
        return "\n".join(lines) + "\n"

    def generate_json(self, report: Report, matches: Optional[Sequence[Match]] = None) -> str:
        """Render the report, and optionally the raw matches, as JSON"""
        categories = self.visible_categories(report)
        grouped = report.to_dict()
        payload = {
            "report": {c.value: grouped[c.value] for c in categories},
        }
        if matches is not None:
            visible = {c.value for c in categories}
            payload["matches"] = [
                {
                    "name": m.name,
                    "path": m.path,
                    "similarity": round(float(m.similarity), 6),
                    "priority": Priority.from_value(m.priority).value,
                    "category": Category.from_value(m.category).value,
                }
                for m in matches
                if Category.from_value(m.category).value in visible
            ]
        return json.dumps(payload, indent=2, ensure_ascii=False)
