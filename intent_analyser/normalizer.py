"""
Text normalization applied before embedding

Reduces raw item or prompt text to the token stream that is embedded and
hashed for the cache. Every step is a pure function; none of them fail.
"""

import re

FRONTMATTER_DELIMITER = "---"

# Lightweight English stop-word list
STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at",
    "be", "by", "for", "from", "has", "he",
    "in", "is", "it", "its", "of", "on",
    "that", "the", "to", "was", "will", "with",
    "this", "these", "those", "or", "but", "can",
    "have", "do", "does", "did", "doing",
})

_WHITESPACE_RE = re.compile(r"\s+")
# Runs of letters and digits; underscore counts as a separator
_TOKEN_RE = re.compile(r"[^\W_]+")


def strip_frontmatter(text: str) -> str:
    """Drop a leading `---` block; unchanged if the block is never closed"""
    lines = text.split("\n")
    if lines and lines[0].startswith(FRONTMATTER_DELIMITER):
        for i in range(1, len(lines)):
            if lines[i].strip() == FRONTMATTER_DELIMITER:
                return "\n".join(lines[i + 1:])
    return text


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text)


def remove_stop_words(text: str) -> str:
    """
    Tokenize on non-alphanumeric runs and drop stop words and 1-byte tokens.

    Token length is measured in UTF-8 bytes, so a lone non-ASCII letter
    such as "é" survives.

    Surviving tokens keep their casing and order and are joined by single
    spaces.
    """
    kept = [
        token for token in _TOKEN_RE.findall(text)
        if len(token.encode("utf-8")) > 1 and token.lower() not in STOP_WORDS
    ]
    return " ".join(kept)


def normalize(text: str) -> str:
    """
    Normalize text for embedding.

    Frontmatter must be stripped before whitespace is collapsed, otherwise
    the delimiter lines disappear; stop words are removed from the collapsed
    text. Casing is preserved: callers lowercase first (see `prepare_text`).
    """
    text = strip_frontmatter(text)
    text = normalize_whitespace(text)
    text = remove_stop_words(text)
    return text.strip()


def prepare_text(text: str) -> str:
    """Lowercase then normalize; the form used for prompts and items alike"""
    return normalize(text.lower())
