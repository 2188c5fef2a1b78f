"""
Checks that only need the raw text of a file.

None of these parse markup; positions come from match offsets or physical
line numbers, so repeated tokens are each reported on their own line.
"""

from __future__ import annotations

import re
from abc import abstractmethod
from typing import TYPE_CHECKING

from site_auditor.locator import line_at
from site_auditor.models import Check, FindingKind
from site_auditor.rules.base import FileRule, RuleRegistry
from site_auditor.utils import truncate_string

if TYPE_CHECKING:
    from typing import Any, Iterator

    from site_auditor.loader import SourceFile
    from site_auditor.models import Finding, ProjectIndex


@RuleRegistry.register(Check.CONSOLE_STATEMENTS)
class ConsoleStatementRule(FileRule):
    """Leftover console debugging calls."""

    PATTERN = re.compile(r"\bconsole\.(log|error|warn|info|debug)\b")

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        for line_number, line in enumerate(source.lines, 1):
            match = self.PATTERN.search(line)
            if not match or self.is_ignored(line):
                continue
            findings.append(self.finding(
                source,
                FindingKind.CONSOLE_STATEMENT,
                f"Avoid using console.{match.group(1)} at line {line_number}.",
                line_number,
            ))
        return findings


@RuleRegistry.register(Check.EMPTY_FILES)
class EmptyFileRule(FileRule):
    """Files with nothing but whitespace."""

    def configure(self, config: dict[str, Any]) -> None:
        super().configure(config)
        self.ignore_files = frozenset(config.get("empty_files", {}).get("ignore_files") or [])

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        if source.name in self.ignore_files or source.text.strip():
            return []
        return [self.finding(
            source,
            FindingKind.EMPTY_FILE,
            f"File '{source.name}' is empty.",
        )]


@RuleRegistry.register(Check.HTML_COMMENTS)
class HtmlCommentRule(FileRule):
    """HTML comments left in shipped markup."""

    PATTERN = re.compile(r"<!--(.*?)-->", re.DOTALL)
    PREVIEW_LENGTH = 80

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        for match in self.PATTERN.finditer(source.text):
            body = match.group(1).strip()
            if not body:
                continue

            line_number = line_at(source.text, match.start())
            if self.is_ignored(source.line_text(line_number)):
                continue

            style = "multi-line" if "\n" in match.group(0) else "single-line"
            preview = truncate_string(body, self.PREVIEW_LENGTH)
            findings.append(self.finding(
                source,
                FindingKind.HTML_COMMENT,
                f'Found {style} HTML comment: "{preview}"',
                line_number,
            ))
        return findings


class OffsetPatternRule(FileRule):
    """
    Shared logic for regex checks over the whole text.

    Files listed under ``<config_section>.ignore_files`` are skipped and
    matches on ignore-marked lines are dropped.
    """

    config_section = ""

    def configure(self, config: dict[str, Any]) -> None:
        super().configure(config)
        section = config.get(self.config_section, {})
        self.ignore_files = frozenset(section.get("ignore_files") or [])

    def matches(self, source: SourceFile) -> Iterator[tuple[re.Match[str], int]]:
        """Yield (match, line) for every non-ignored match of every pattern."""
        if source.name in self.ignore_files:
            return
        for pattern in self.patterns():
            for match in pattern.finditer(source.text):
                line_number = line_at(source.text, match.start())
                if self.is_ignored(source.line_text(line_number)):
                    continue
                yield match, line_number

    @abstractmethod
    def patterns(self) -> list[re.Pattern[str]]:
        """Compiled patterns searched over the whole text."""
        ...


@RuleRegistry.register(Check.GLOBAL_VARIABLES)
class GlobalVariableRule(OffsetPatternRule):
    """References to configured global variable names."""

    config_section = "global_variables"

    def configure(self, config: dict[str, Any]) -> None:
        super().configure(config)
        names = config.get(self.config_section, {}).get("names") or []
        # Names are literal; identifier characters may not touch either side
        self._patterns = [
            re.compile(r"(?<![\w$])" + re.escape(name) + r"(?![\w$])")
            for name in names if name
        ]

    def patterns(self) -> list[re.Pattern[str]]:
        return self._patterns

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        return [
            self.finding(
                source,
                FindingKind.GLOBAL_VARIABLE_USAGE,
                f"Global variable '{match.group(0)}' found. Consider modular approach.",
                line_number,
            )
            for match, line_number in self.matches(source)
        ]


@RuleRegistry.register(Check.DOT_HTML_LINKS)
class DotHtmlLinkRule(OffsetPatternRule):
    """Quoted string literals pointing at static .html pages."""

    # Shares its exemption list with the global variable check
    config_section = "global_variables"
    PATTERN = re.compile(r"""(["'`])([^"'`\r\n]*?\.html)\1""", re.IGNORECASE)

    def patterns(self) -> list[re.Pattern[str]]:
        return [self.PATTERN]

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        return [
            self.finding(
                source,
                FindingKind.DOT_HTML_LINK,
                f"Reference to '{match.group(2)}' found. "
                "Use dynamic routing instead of static .html links.",
                line_number,
            )
            for match, line_number in self.matches(source)
        ]


@RuleRegistry.register(Check.OLD_DOMAINS)
class OldDomainRule(FileRule):
    """Lines mentioning a deprecated domain. Every matching line is reported."""

    def configure(self, config: dict[str, Any]) -> None:
        super().configure(config)
        domains = config.get("deprecated_domains", {}).get("domains") or []
        self.domains = [domain for domain in domains if domain]

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        for domain in self.domains:
            for line_number, line in enumerate(source.lines, 1):
                if domain in line and not self.is_ignored(line):
                    findings.append(self.finding(
                        source,
                        FindingKind.OLD_DOMAIN_REFERENCE,
                        f"Deprecated domain '{domain}' referenced.",
                        line_number,
                    ))
        return findings


@RuleRegistry.register(Check.INSECURE_URLS)
class InsecureUrlRule(FileRule):
    """Plain http:// URLs, deduplicated by (url, file, line)."""

    PATTERN = re.compile(r"http://[^\s\"'<>()\[\]{}`\\]+", re.IGNORECASE)
    TRAILING = ".,;:!?"

    def configure(self, config: dict[str, Any]) -> None:
        super().configure(config)
        allow = config.get("insecure_urls", {}).get("allow_prefixes") or []
        self.allow_prefixes = tuple(prefix.lower() for prefix in allow)

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        seen: set[tuple[str, str, int]] = set()
        path = str(source.path)

        for line_number, line in enumerate(source.lines, 1):
            if "http://" not in line.lower() or self.is_ignored(line):
                continue
            for match in self.PATTERN.finditer(line):
                url = match.group(0).rstrip(self.TRAILING)
                if url.lower().startswith(self.allow_prefixes):
                    continue
                key = ("insecure-url", url, path, line_number)
                if key in seen:
                    continue
                seen.add(key)
                findings.append(self.finding(
                    source,
                    FindingKind.INSECURE_URL,
                    f"Insecure URL '{url}' uses http://; switch to https://.",
                    line_number,
                    key=key,
                ))
        return findings

