"""
Main scanner orchestrator for site_auditor.

Walks the project, loads each file once, runs the selected checks against it,
then runs the project-wide checks and returns the combined findings.
"""

from __future__ import annotations

import logging
import os
from contextlib import ExitStack
from pathlib import Path
from typing import TYPE_CHECKING

from site_auditor.config import DEFAULT_CONFIG, get_exclude, normalize_extensions
from site_auditor.errors import ReadFailure
from site_auditor.index import ProjectIndexBuilder
from site_auditor.loader import load
from site_auditor.models import Finding, FindingKind, ScanRequest
from site_auditor.probe import HttpProbe
from site_auditor.rules import FileRule, ProjectRule, RuleRegistry
from site_auditor.walker import ensure_directory, walk_files

if TYPE_CHECKING:
    from typing import Any, Iterable

    from site_auditor.models import ProjectIndex
    from site_auditor.probe import Probe

logger = logging.getLogger(__name__)


class FindingCollector:
    """
    Ordered findings with duplicate suppression.

    Findings carrying a dedupe key are kept once per key; findings without
    one are always kept.
    """

    def __init__(self) -> None:
        self.findings: list[Finding] = []
        self._seen: set[tuple[Any, ...]] = set()

    def add(self, finding: Finding) -> None:
        key = finding.dedupe_key
        if key is not None:
            if key in self._seen:
                return
            self._seen.add(key)
        self.findings.append(finding)

    def extend(self, findings: Iterable[Finding]) -> None:
        for finding in findings:
            self.add(finding)

    def __len__(self) -> int:
        return len(self.findings)


class SiteScanner:
    """
    Run site checks over a project directory.

    A scanner holds only read-only configuration, so one instance can serve
    concurrent scans; every scan builds its own index and finding list.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        probe: Probe | None = None,
    ):
        """
        Initialize the site scanner.

        Args:
            config: Configuration dictionary (merged with defaults).
            probe: URL reachability callable for broken-links; an HttpProbe
                is created per scan when omitted.
        """
        self.config = config or DEFAULT_CONFIG
        self.probe = probe
        self.exclude = get_exclude(self.config)
        self.markup_extensions = normalize_extensions(
            self.config.get("extensions", {}).get("markup", [])
        )

    def scan(self, request: ScanRequest) -> list[Finding]:
        """
        Run one scan.

        Args:
            request: Root, scope and check selection.

        Returns:
            Findings in file-visit order, per-file checks before project checks.

        Raises:
            DirectoryNotFound: If the root doesn't exist. Nothing else escapes.
            UnknownCheck: If the selection names an unregistered check.
        """
        root = ensure_directory(Path(request.root))
        checks = RuleRegistry.resolve(request.checks, read_only=request.read_only)
        logger.debug("Scanning %s with checks: %s", root, ", ".join(c.value for c in checks))

        with ExitStack() as stack:
            rules = [RuleRegistry.create(check, self.config, self.probe) for check in checks]
            for rule in rules:
                if rule.uses_probe and rule.probe is None:
                    rule.probe = stack.enter_context(HttpProbe.from_config(self.config))

            file_rules = [rule for rule in rules if isinstance(rule, FileRule)]
            project_rules = [rule for rule in rules if isinstance(rule, ProjectRule)]

            index = None
            if any(rule.needs_index for rule in rules):
                index = ProjectIndexBuilder(self.config).build(root)

            collector = FindingCollector()
            if file_rules or not request.is_project_scope:
                for filepath, missing in self._resolve_files(root, request):
                    if missing is not None:
                        collector.add(self._file_not_found(root, missing))
                        continue
                    collector.extend(self._scan_file(filepath, file_rules, index))

            for rule in project_rules:
                collector.extend(self._run_project_rule(rule, root, index))

        logger.debug("Scan of %s produced %d findings", root, len(collector))
        return collector.findings

    def _resolve_files(
        self,
        root: Path,
        request: ScanRequest,
    ) -> Iterable[tuple[Path | None, str | None]]:
        """
        Yield (path, None) for files to scan and (None, name) for requested
        names that match nothing.
        """
        candidates = list(walk_files(root, self.markup_extensions, self.exclude))
        if request.is_project_scope:
            for filepath in candidates:
                yield filepath, None
            return

        scanned: set[Path] = set()
        for name in request.files or ():
            matches = self._match_name(root, name, candidates)
            if not matches:
                yield None, name
                continue
            for filepath in matches:
                if filepath not in scanned:
                    scanned.add(filepath)
                    yield filepath, None

    @staticmethod
    def _match_name(root: Path, name: str, candidates: list[Path]) -> list[Path]:
        """Candidates whose path ends with ``name`` on a path-component boundary."""
        wanted = name.strip().replace("/", os.sep).replace("\\", os.sep).strip(os.sep)
        if not wanted:
            return []
        matches = []
        for filepath in candidates:
            path = str(filepath)
            if path == wanted or path.endswith(os.sep + wanted):
                matches.append(filepath)
        return matches

    @staticmethod
    def _file_not_found(root: Path, name: str) -> Finding:
        display = os.path.basename(name.strip()) or name
        return Finding(
            file_path=str(root),
            file_name=display,
            kind=FindingKind.FILE_NOT_FOUND,
            message=f"The page '{display}' does not exist in the specified directory.",
        )

    def _scan_file(
        self,
        filepath: Path,
        rules: list[FileRule],
        index: ProjectIndex | None,
    ) -> list[Finding]:
        """Load one file and run every applicable rule; failures become findings."""
        try:
            source = load(filepath)
        except ReadFailure as e:
            logger.debug("%s", e)
            return [Finding(
                file_path=str(filepath),
                file_name=filepath.name,
                kind=FindingKind.READ_FAILURE,
                message=f"File '{filepath.name}' could not be read: {e.reason}.",
            )]

        findings: list[Finding] = []
        for rule in rules:
            if not rule.applies_to(source):
                continue
            try:
                findings.extend(rule.evaluate(source, index))
            except Exception as e:
                logger.exception("Check %s failed on %s", rule.name, filepath)
                findings.append(Finding(
                    file_path=str(filepath),
                    file_name=filepath.name,
                    kind=FindingKind.UNEXPECTED_FAILURE,
                    message=f"Check '{rule.name}' failed on this file: {e}",
                ))
        return findings

    @staticmethod
    def _run_project_rule(
        rule: ProjectRule,
        root: Path,
        index: ProjectIndex | None,
    ) -> list[Finding]:
        try:
            return rule.run(root, index)
        except Exception as e:
            logger.exception("Check %s failed", rule.name)
            return [Finding(
                file_path=str(root),
                file_name=root.name,
                kind=FindingKind.UNEXPECTED_FAILURE,
                message=f"Check '{rule.name}' failed: {e}",
            )]


def scan_site(
    root: str | Path,
    files: Iterable[str] | None = None,
    checks: Iterable[str] = ("all",),
    config: dict[str, Any] | None = None,
    probe: Probe | None = None,
    read_only: bool = False,
) -> list[Finding]:
    """Convenience wrapper: build a ScanRequest and run it."""
    request = ScanRequest(
        root=Path(root),
        files=tuple(files) if files is not None else None,
        checks=tuple(checks),
        read_only=read_only,
    )
    return SiteScanner(config=config, probe=probe).scan(request)
