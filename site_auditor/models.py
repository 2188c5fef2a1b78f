"""
Shared data models for site_auditor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple


NOT_APPLICABLE = "N/A"


class FindingKind(Enum):
    """What kind of issue a finding reports. The value is the display label."""

    MISSING_ALT = "Missing alt"
    INVALID_MAILTO = "Invalid mailto"
    MISSING_TARGET_BLANK = 'Missing target="_blank"'
    CONSOLE_STATEMENT = "Console statement"
    EMPTY_FILE = "Empty file"
    BROKEN_LINK = "Broken link"
    HTML_COMMENT = "HTML comment"
    MISSING_FOOTER = "Missing footer"
    MISSING_FAVICON = "Missing favicon"
    GLOBAL_VARIABLE_USAGE = "Global variable usage"
    DOT_HTML_LINK = ".html link"
    OLD_DOMAIN_REFERENCE = "Old domain reference"
    INSECURE_URL = "Insecure URL"
    SUSPICIOUS_TEST_FILE = "Suspicious test file"
    MISSING_INDEX_FILE = "Missing index.php"
    MISSING_IMAGE = "Missing image"
    UNUSED_IMAGE = "Unused image"
    FILE_NOT_FOUND = "File not found"
    READ_FAILURE = "Read failure"
    UNEXPECTED_FAILURE = "Unexpected failure"

    @property
    def label(self) -> str:
        return self.value


class Check(str, Enum):
    """Selectable rule identifiers, in the order "all" runs them."""

    MISSING_ALT = "missing-alt"
    INVALID_MAILTO = "invalid-mailto"
    CONSOLE_STATEMENTS = "console-statements"
    EMPTY_FILES = "empty-files"
    BROKEN_LINKS = "broken-links"
    HTML_COMMENTS = "html-comments"
    MISSING_FOOTER = "missing-footer"
    MISSING_FAVICON = "missing-favicon"
    GLOBAL_VARIABLES = "global-variables"
    DOT_HTML_LINKS = "dot-html-links"
    OLD_DOMAINS = "old-domains"
    INSECURE_URLS = "insecure-urls"
    SUSPICIOUS_FILES = "suspicious-files"
    MISSING_INDEX_FILES = "missing-index-files"
    MISSING_IMAGES = "missing-images"
    UNUSED_IMAGES = "unused-images"


ALL_CHECKS = "all"


@dataclass(frozen=True)
class Finding:
    """A single reported issue."""

    file_path: str
    file_name: str
    kind: FindingKind
    message: str
    line_number: int | None = None  # None = not applicable
    dedupe_key: tuple[Any, ...] | None = field(default=None, compare=False)

    @property
    def display_line(self) -> int | str:
        return self.line_number if self.line_number is not None else NOT_APPLICABLE

    def to_dict(self) -> dict[str, Any]:
        """Flat record used by the JSON/xlsx/pdf exporters."""
        return {
            "file_path": self.file_path,
            "file_name": self.file_name,
            "line_number": self.display_line,
            "type": self.kind.label,
            "kind": self.kind.name,
            "message": self.message,
        }

    def __str__(self) -> str:
        return f"{self.file_path}:{self.display_line} [{self.kind.label}] {self.message}"


@dataclass(frozen=True)
class ScanRequest:
    """
    One scan invocation.

    Attributes:
        root: Project directory.
        files: Requested file names (matched by path suffix), or None for the
            whole project.
        checks: Check identifiers or "all".
        read_only: Skip checks that write to disk.
    """

    root: Path
    files: tuple[str, ...] | None = None
    checks: tuple[str, ...] = (ALL_CHECKS,)
    read_only: bool = False

    @classmethod
    def from_form(
        cls,
        directory: str,
        page_name: str = "",
        check_type: str = "project",
        check: str = ALL_CHECKS,
        read_only: bool = False,
    ) -> "ScanRequest":
        """
        Build a request from the classic form fields.

        ``check_type == "project"`` scans everything; anything else treats
        ``page_name`` as a comma-separated list of file names.
        """
        files: tuple[str, ...] | None = None
        if check_type != "project":
            files = tuple(name.strip() for name in (page_name or "").split(","))
        return cls(
            root=Path(directory),
            files=files,
            checks=(check or ALL_CHECKS,),
            read_only=read_only,
        )

    @property
    def is_project_scope(self) -> bool:
        return self.files is None


class ImageReference(NamedTuple):
    """Where an image name is referenced."""

    file: str
    line: int | None


@dataclass
class ProjectIndex:
    """
    Whole-tree facts shared by the cross-file checks.

    Built completely by ProjectIndexBuilder before any check reads it.
    """

    existing_images: dict[str, list[str]] = field(default_factory=dict)
    # name -> ordered set of references (dict keys keep insertion order)
    referenced_images: dict[str, dict[ImageReference, None]] = field(default_factory=dict)
    all_directories: list[str] = field(default_factory=list)

    def add_image(self, name: str, path: str) -> None:
        self.existing_images.setdefault(name, []).append(path)

    def add_reference(self, name: str, reference: ImageReference) -> None:
        self.referenced_images.setdefault(name, {})[reference] = None
