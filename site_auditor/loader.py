"""
File loading for site_auditor.

Turns a file on disk into a SourceFile: the raw text for line-oriented checks
plus a lazily built BeautifulSoup document for structural ones. The document
is parsed at most once per file no matter how many checks query it.
"""

from __future__ import annotations

import logging
import warnings
from functools import cached_property
from pathlib import Path

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from site_auditor.errors import ReadFailure

logger = logging.getLogger(__name__)

HTML_PARSER = "html.parser"


def parse_markup(text: str) -> BeautifulSoup:
    """Parse markup permissively; PHP/JSX fragments are tolerated as-is."""
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)
        return BeautifulSoup(text, HTML_PARSER)


def decode_bytes(data: bytes, path: Path) -> str:
    """
    Decode file content as text.

    Raises:
        ReadFailure: If the content looks binary.
    """
    if b"\x00" in data:
        raise ReadFailure(str(path), "binary content")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("%s is not valid UTF-8, decoding with replacement characters", path)
        return data.decode("utf-8", errors="replace")


class SourceFile:
    """One scanned file: path, raw text and parsed document."""

    def __init__(self, path: Path, text: str) -> None:
        self.path = path
        self.text = text

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def suffix(self) -> str:
        return self.path.suffix.lower()

    @cached_property
    def document(self) -> BeautifulSoup:
        return parse_markup(self.text)

    @cached_property
    def lines(self) -> list[str]:
        return self.text.split("\n")

    def line_text(self, line_number: int | None) -> str:
        """Content of a 1-based physical line ("" when unknown or out of range)."""
        if line_number is None or not 1 <= line_number <= len(self.lines):
            return ""
        return self.lines[line_number - 1]

    def __repr__(self) -> str:
        return f"SourceFile({str(self.path)!r})"


def load(path: Path) -> SourceFile:
    """
    Read a file into a SourceFile.

    Args:
        path: File to read.

    Returns:
        The loaded file.

    Raises:
        ReadFailure: If the file can't be read or is binary.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ReadFailure(str(path), e.strerror or str(e)) from e
    return SourceFile(path, decode_bytes(data, path))
