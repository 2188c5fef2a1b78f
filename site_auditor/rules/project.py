"""
Checks that look at the whole project rather than one file.

MissingIndexFileRule WRITES to the scanned tree: every directory lacking an
index file gets a placeholder one. Scans with ``read_only`` set never run it.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from site_auditor.config import get_exclude
from site_auditor.models import Check, Finding, FindingKind
from site_auditor.rules.base import ProjectRule, RuleRegistry
from site_auditor.utils import display_name
from site_auditor.walker import walk_files

if TYPE_CHECKING:
    from typing import Any

    from site_auditor.models import ProjectIndex

logger = logging.getLogger(__name__)


@RuleRegistry.register(Check.SUSPICIOUS_FILES)
class SuspiciousFileRule(ProjectRule):
    """Scratch files such as a.php, test.js or tmp.txt left in the tree."""

    def configure(self, config: dict[str, Any]) -> None:
        super().configure(config)
        settings = config.get("suspicious_files", {})
        names = [re.escape(name) for name in settings.get("names") or []]
        extensions = [re.escape(ext.lstrip(".")) for ext in settings.get("extensions") or []]
        stems = "|".join(["[a-z]"] + names)
        # "(?!)" never matches, so an empty extension list disables the check
        suffixes = "|".join(extensions) or "(?!)"
        self.pattern = re.compile(rf"^(?:{stems})\.(?:{suffixes})$", re.IGNORECASE)

    def run(self, root: Path, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        seen: set[str] = set()
        for filepath in walk_files(root, None, get_exclude(self.config)):
            path = str(filepath)
            if path in seen or not self.pattern.match(filepath.name):
                continue
            seen.add(path)
            findings.append(Finding(
                file_path=path,
                file_name=filepath.name,
                kind=FindingKind.SUSPICIOUS_TEST_FILE,
                message=f"File '{filepath.name}' looks like a scratch/test file.",
                dedupe_key=("suspicious-file", path),
            ))
        return findings


@RuleRegistry.register(Check.MISSING_INDEX_FILES)
class MissingIndexFileRule(ProjectRule):
    """
    Directories without an index file.

    Side effect: creates the missing file with placeholder content. Creation
    is exclusive, so when a concurrent scan wins the race the existing file is
    accepted and nothing is reported. A second scan finds nothing to report.
    """

    needs_index = True
    writes_files = True

    def configure(self, config: dict[str, Any]) -> None:
        super().configure(config)
        settings = config.get("index_file", {})
        self.filename = settings.get("name", "index.php")
        self.content = settings.get("content", "")

    def run(self, root: Path, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        for directory in index.all_directories if index else []:
            index_path = Path(directory) / self.filename
            if index_path.exists():
                continue
            try:
                with open(index_path, "x", encoding="utf-8") as f:
                    f.write(self.content)
            except FileExistsError:
                continue
            except OSError as e:
                logger.warning("Could not create %s: %s", index_path, e)
                continue

            logger.info("Created placeholder %s", index_path)
            findings.append(Finding(
                file_path=directory,
                file_name=self.filename,
                kind=FindingKind.MISSING_INDEX_FILE,
                message=f"{self.filename} was missing and has been created.",
                dedupe_key=("missing-index-file", directory),
            ))
        return findings


@RuleRegistry.register(Check.MISSING_IMAGES)
class MissingImageRule(ProjectRule):
    """Images referenced somewhere but present nowhere in the tree."""

    needs_index = True

    def run(self, root: Path, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        if index is None:
            return findings
        for name, references in index.referenced_images.items():
            if name in index.existing_images:
                continue
            for reference in references:
                findings.append(Finding(
                    file_path=reference.file,
                    file_name=display_name(reference.file),
                    kind=FindingKind.MISSING_IMAGE,
                    message=f"Image '{name}' is referenced but does not exist in the project.",
                    line_number=reference.line,
                    dedupe_key=("missing-image", name, reference.file, reference.line),
                ))
        return findings


@RuleRegistry.register(Check.UNUSED_IMAGES)
class UnusedImageRule(ProjectRule):
    """Images present in the tree that nothing references. Each copy is reported."""

    needs_index = True

    def run(self, root: Path, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        if index is None:
            return findings
        for name, paths in index.existing_images.items():
            if name in index.referenced_images:
                continue
            for path in paths:
                findings.append(Finding(
                    file_path=path,
                    file_name=name,
                    kind=FindingKind.UNUSED_IMAGE,
                    message=f"Image '{name}' is never referenced.",
                    dedupe_key=("unused-image", name, os.path.dirname(path)),
                ))
        return findings
