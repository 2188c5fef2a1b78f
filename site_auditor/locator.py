"""
Line-number lookup for findings.

Every check reports positions through these helpers so that repeated tokens
land on successive occurrences instead of all collapsing onto the first one.
"""

from __future__ import annotations

import re
from typing import Any, Optional

# Returned when a needle can't be found; callers report "line unknown".
NOT_FOUND = None

NEWLINE_RE = re.compile(r"\n")


def line_at(text: str, offset: int) -> int:
    """
    Get the 1-based line number of a character offset.

    Args:
        text: Raw file content.
        offset: Index into ``text``.

    Returns:
        1 + number of newlines before ``offset``.
    """
    return text.count("\n", 0, max(offset, 0)) + 1


def line_of(text: str, needle: str, start: int = 0) -> Optional[int]:
    """
    Find the line of the first occurrence of ``needle`` at or after ``start``.

    Multi-line needles report the line they start on.

    Returns:
        1-based line number, or NOT_FOUND.
    """
    if not needle:
        return NOT_FOUND
    index = text.find(needle, start)
    if index == -1:
        return NOT_FOUND
    return line_at(text, index)


class LineCursor:
    """
    Advancing search over one file's text.

    Each successful ``find`` moves the cursor past the match, so calling it
    once per element in document order attributes duplicates to the right
    lines. ``seek`` jumps to a known (line, column) position first, so a
    search for an element's attribute value starts at the element itself.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.offset = 0
        self._line_starts: list[int] | None = None

    def offset_of(self, line: int, column: int = 0) -> Optional[int]:
        """Text offset of a 1-based line and 0-based column, or None if out of range."""
        if self._line_starts is None:
            self._line_starts = [0] + [m.end() for m in NEWLINE_RE.finditer(self.text)]
        if not 1 <= line <= len(self._line_starts):
            return None
        return min(self._line_starts[line - 1] + max(column, 0), len(self.text))

    def seek(self, line: int, column: int = 0) -> None:
        """Move the cursor to a (line, column) position; out-of-range positions are ignored."""
        offset = self.offset_of(line, column)
        if offset is not None:
            self.offset = offset

    def find(self, needle: str) -> Optional[int]:
        """Line of the next occurrence of ``needle``; the cursor stays put if absent."""
        if not needle:
            return NOT_FOUND
        index = self.text.find(needle, self.offset)
        if index == -1:
            return NOT_FOUND
        self.offset = index + len(needle)
        return line_at(self.text, index)


def element_line(cursor: LineCursor, tag: Any, needle: str | None) -> Optional[int]:
    """
    Line of a parsed element's ``needle`` (usually an attribute value).

    The search starts at the element's own start tag when the parser recorded
    its position, so the same value appearing earlier in another element,
    a comment or plain text is never mistaken for it. Falls back to the
    parser's line when the needle doesn't appear verbatim (entity-encoded
    attribute values, for instance).
    """
    line = getattr(tag, "sourceline", None)
    if line is not None:
        cursor.seek(line, getattr(tag, "sourcepos", None) or 0)
    found = cursor.find(needle) if needle else NOT_FOUND
    return found if found is not None else line
