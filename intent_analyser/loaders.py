"""
Loading skill and agent items from files
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from intent_core.types import Category, Item, Priority

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"
METADATA_KEYS = ("name", "priority", "type")
AGENTS_DIR = "agents"
SKILLS_DIR = "skills"


def _frontmatter_block(content: str) -> Optional[str]:
    """Get the raw frontmatter lines; an unclosed block runs to the end of the text"""
    lines = content.split("\n")
    if not lines or not lines[0].startswith(FRONTMATTER_DELIMITER):
        return None
    for i in range(1, len(lines)):
        if lines[i].strip() == FRONTMATTER_DELIMITER:
            return "\n".join(lines[1:i])
    return "\n".join(lines[1:])


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().strip("\"'")


def _scan_lines(block: str) -> Dict[str, str]:
    """Line-based `key: value` scan for frontmatter that is not valid YAML"""
    fields: Dict[str, str] = {}
    for line in block.split("\n"):
        line = line.strip()
        for key in METADATA_KEYS:
            prefix = f"{key}:"
            if line.startswith(prefix):
                value = _clean(line[len(prefix):])
                if value:
                    fields[key] = value
    return fields


def parse_frontmatter(content: str) -> Dict[str, str]:
    """
    Read name, priority and type from a leading frontmatter block.

    Descriptions often contain unquoted colons, which YAML rejects; those
    blocks are read line by line instead.

    Returns:
        Mapping holding only the keys that were found with non-empty values
    """
    block = _frontmatter_block(content)
    if block is None:
        return {}

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.debug(f"Frontmatter is not valid YAML, scanning lines: {e}")
        return _scan_lines(block)

    if not isinstance(data, dict):
        return _scan_lines(block)

    fields: Dict[str, str] = {}
    for key in METADATA_KEYS:
        value = _clean(data.get(key))
        if value:
            fields[key] = value
    return fields


def category_from_path(path: Union[str, Path]) -> str:
    """Infer the category from an `agents` or `skills` directory in the path"""
    parts = Path(path).parts[:-1]
    if AGENTS_DIR in parts:
        return Category.AGENT.value
    return Category.SKILL.value


def extract_metadata(content: str, path: Union[str, Path]) -> Tuple[str, str, str]:
    """
    Extract name, priority and category for an item.

    Args:
        content: Raw file content
        path: Location of the file

    Returns:
        (name, priority, category). The name falls back to the absolute
        path, the priority to "medium" and the category to the path segment
        (default "skill").
    """
    fields = parse_frontmatter(content)
    name = fields.get("name") or os.path.abspath(str(path))
    priority = fields.get("priority") or Priority.MEDIUM.value
    category = fields.get("type") or category_from_path(path)
    return name, priority, category


def load_item(path: Union[str, Path]) -> Item:
    """Load a single item; read errors propagate"""
    path = Path(path)
    content = path.read_text(encoding="utf-8", errors="replace")
    name, priority, category = extract_metadata(content, path)
    return Item(
        name=name,
        path=str(path),
        content=content,
        priority=priority,
        category=category,
    )


def load_items(path: Union[str, Path]) -> List[Item]:
    """
    Load items from a file, or from every file under a directory.

    Directories are walked recursively in sorted path order. Files that
    cannot be read are logged and skipped.

    Raises:
        FileNotFoundError: if `path` does not exist
    """
    root = Path(path)
    if not root.exists():
        raise FileNotFoundError(f"No such file or directory: {root}")

    if not root.is_dir():
        return [load_item(root)]

    items: List[Item] = []
    for file_path in sorted(p for p in root.rglob("*") if p.is_file()):
        try:
            items.append(load_item(file_path))
        except OSError as e:
            logger.warning(f"Failed to read {file_path}: {e}")
    logger.info(f"Loaded {len(items)} items from {root}")
    return items
