"""
Utility functions for site_auditor.
"""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from urllib.parse import urlsplit

# Prefixes that mark a reference as not pointing into the project tree
ABSOLUTE_URL_PREFIXES = ("http:", "https:", "//", "data:", "blob:")

# Markers of server- or client-side templating inside attribute values
TEMPLATE_MARKERS = ("<?", "{", "$")


def should_exclude(path: Path, exclude_patterns: list[str]) -> bool:
    """
    Check if a path should be excluded based on patterns.

    Args:
        path: Path to check.
        exclude_patterns: List of patterns. Patterns starting with '*'
            match suffixes, others match the path's basename.

    Returns:
        True if the path should be excluded.
    """
    name = path.name
    for pattern in exclude_patterns:
        if pattern.startswith("*"):
            # Suffix match (e.g., "*.min.js")
            if name.endswith(pattern[1:]):
                return True
        elif pattern == name:
            return True
    return False


def truncate_string(text: str, max_length: int = 80) -> str:
    """
    Truncate a string to a maximum length.

    Args:
        text: String to truncate.
        max_length: Maximum length kept before the ellipsis.

    Returns:
        The string, cut to ``max_length`` with a "..." suffix if it was longer.
    """
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def has_marker(line: str, marker: str) -> bool:
    """Whether a physical line carries the ignore marker."""
    return bool(marker) and marker in line


def is_local_reference(src: str) -> bool:
    """True for relative/root-relative references into the project."""
    src = src.strip()
    if not src:
        return False
    lowered = src.lower()
    if lowered.startswith(ABSOLUTE_URL_PREFIXES):
        return False
    return not any(marker in src for marker in TEMPLATE_MARKERS)


def reference_basename(src: str) -> str:
    """Basename of a reference with any query string or fragment removed."""
    path = urlsplit(src.strip()).path
    return posixpath.basename(path.replace("\\", "/"))


def display_name(path: str) -> str:
    """Basename for display, tolerant of trailing separators."""
    return os.path.basename(path.rstrip(os.sep)) or path
