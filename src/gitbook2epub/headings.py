"""Rewrite Markdown heading levels so each fragment adds one outline entry."""

from __future__ import annotations

import re

_HEADING_RE = re.compile(r"^(#+)\s+(.*)$")


def demote(original_level: int, target_top_level: int) -> int:
    """Return the level for a heading that follows a fragment's first heading.

    The result is always below ``target_top_level`` so it stays out of a
    table of contents cut off at that depth.
    """
    return max(original_level + 1, target_top_level + 1)


def is_heading(line: str) -> bool:
    """Return True for ATX heading lines (``#`` run followed by whitespace)."""
    return _HEADING_RE.match(line) is not None


def heading_stub(title: str, level: int) -> str:
    """Body for a node without a readable source."""
    return f"{'#' * level} {title}\n\n"


def normalize_headings(text: str, target_level: int) -> str:
    """Promote the first heading to ``target_level`` and demote the rest.

    Args:
        text: Fragment Markdown.
        target_level: Outline depth of the fragment (1, 2 or 3).

    Returns:
        The rewritten text. Non-heading lines and line endings are untouched;
        text without headings is returned unchanged.
    """
    lines = text.split("\n")
    first_found = False
    for index, line in enumerate(lines):
        if not is_heading(line):
            continue
        hashes, heading_text = _HEADING_RE.match(line).groups()
        if not first_found:
            first_found = True
            level = target_level
        else:
            level = demote(len(hashes), target_level)
        lines[index] = f"{'#' * level} {heading_text}"
    return "\n".join(lines)
