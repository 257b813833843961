"""
Language-agnostic comment detection.

A line counts as a comment when its first non-blank characters come from a
small set of common comment markers. This over-matches (a C pointer
dereference or a markdown bullet both look like comments) but needs no
knowledge of the source language.
"""

from __future__ import annotations

from typing import Optional, Tuple

COMMENT_MARKERS = frozenset("/#%;*")

# Order matters: the first matching prefix wins.
TITLE_PREFIXES = ("TODO: ", "FIXME: ", "BUG: ", "HACK: ", "URGENT: ", "REFS: ")


def parse_comment(line: str) -> Optional[str]:
    """
    Return the trimmed text of a comment line, or None if ``line`` is not a comment.

    A marker with nothing after it is still a comment and yields an empty string.
    """
    start = 0
    size = len(line)
    while start < size and line[start].isspace():
        start += 1

    marker_end = start
    while marker_end < size and line[marker_end] in COMMENT_MARKERS:
        marker_end += 1
    if marker_end == start:
        return None

    return line[marker_end:].strip()


def match_title(text: Optional[str]) -> Optional[Tuple[str, str]]:
    """Return ``(tag, title)`` when comment text opens a new annotated block."""
    if not text:
        return None
    for prefix in TITLE_PREFIXES:
        width = len(prefix)
        if len(text) > width and text[:width].upper() == prefix:
            # drop the trailing ": "
            return prefix[:-2], text[width:]
    return None
