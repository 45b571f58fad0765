"""
Frontmatter extraction for skill documents.

A skill document may start with a metadata block delimited by ``---``
lines. Each line inside the block is read as ``key: value``. Parsing never
fails: a missing, unterminated or garbled block yields an empty mapping,
so ``strip_frontmatter`` is safe to call on any text.
"""

from __future__ import annotations

import re as _re

import skillbook.constants as constants

_BOM = "\ufeff"

# key: value, where key is a bare identifier (hyphens allowed)
_KEY_VALUE_RE = _re.compile(r"^([A-Za-z0-9_][A-Za-z0-9_-]*):\s*(.*)$")

Frontmatter = dict[str, str]


def _is_delimiter(line: str) -> bool:
    return line.strip() == constants.FRONTMATTER_DELIMITER


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _find_block(text: str) -> tuple[list[str], int] | None:
    """
    Locate the frontmatter block.

    Returns:
        Tuple of (lines inside the block, index of the closing delimiter
        line within ``text.splitlines(keepends=True)``), or None when there
        is no complete block.
    """
    lines = text.splitlines(keepends=True)
    if not lines:
        return None

    first = lines[0]
    if first.startswith(_BOM):
        first = first[len(_BOM):]
    if not _is_delimiter(first):
        return None

    for i in range(1, len(lines)):
        if _is_delimiter(lines[i]):
            return [line.rstrip("\r\n") for line in lines[1:i]], i

    # Opened but never closed
    return None


def extract_frontmatter(text: str) -> Frontmatter:
    """
    Parse the frontmatter block at the start of ``text``.

    Args:
        text: Raw document text.

    Returns:
        Mapping of keys to values. Empty when the document has no complete
        frontmatter block. Lines that are not ``key: value`` are ignored.
    """
    block = _find_block(text)
    if block is None:
        return {}

    inner, _ = block
    result: Frontmatter = {}
    for line in inner:
        match = _KEY_VALUE_RE.match(line.rstrip())
        if not match:
            continue
        key = match.group(1)
        value = _unquote((match.group(2) or "").strip())
        result[key] = value
    return result


def strip_frontmatter(text: str) -> str:
    """
    Remove the frontmatter block from ``text``.

    Everything after the closing delimiter is kept verbatim, except the
    blank lines directly following it. Text without a complete block is
    returned unchanged.

    Args:
        text: Raw document text.

    Returns:
        The document body.
    """
    block = _find_block(text)
    if block is None:
        return text

    _, closing_index = block
    rest = text.splitlines(keepends=True)[closing_index + 1:]

    start = 0
    while start < len(rest) and not rest[start].strip():
        start += 1
    return "".join(rest[start:])


def split_frontmatter(text: str) -> tuple[Frontmatter, str]:
    """Return ``(extract_frontmatter(text), strip_frontmatter(text))``."""
    return extract_frontmatter(text), strip_frontmatter(text)
