"""
Checks that query the parsed document: images, anchors, footer, favicon.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from site_auditor.locator import LineCursor, element_line, line_at, line_of
from site_auditor.models import Check, FindingKind
from site_auditor.rules.base import FileRule, RuleRegistry

if TYPE_CHECKING:
    from typing import Any

    from site_auditor.loader import SourceFile
    from site_auditor.models import Finding, ProjectIndex

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAILTO = "mailto:"
FAVICON_RELS = {"icon", "shortcut icon"}
HEAD_OPEN_RE = re.compile(r"<head[\s>]", re.IGNORECASE)


def head_line(text: str) -> int | None:
    """Line of the <head> open tag (not <header>)."""
    match = HEAD_OPEN_RE.search(text)
    return line_at(text, match.start()) if match else None


@RuleRegistry.register(Check.MISSING_ALT)
class MissingAltRule(FileRule):
    """Images without alt text."""

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        cursor = LineCursor(source.text)

        for img in source.document.find_all("img"):
            src = img.get("src")
            line = element_line(cursor, img, src or "<img")
            if self.is_ignored(source.line_text(line)):
                continue

            alt = img.get("alt")
            if alt is None or not alt.strip():
                label = src if src else "[no src]"
                findings.append(self.finding(
                    source,
                    FindingKind.MISSING_ALT,
                    f"Image with src '{label}' is missing alt text.",
                    line,
                ))
        return findings


@RuleRegistry.register(Check.INVALID_MAILTO)
class InvalidMailtoRule(FileRule):
    """Malformed mailto: addresses and mailto links that don't open a new window."""

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        findings: list[Finding] = []
        cursor = LineCursor(source.text)

        for anchor in source.document.find_all("a"):
            href = anchor.get("href") or ""
            if not href.lower().startswith(MAILTO):
                continue

            line = element_line(cursor, anchor, href)
            if self.is_ignored(source.line_text(line)):
                continue

            address = href[len(MAILTO):].split("?", 1)[0].strip()
            if not EMAIL_RE.match(address):
                findings.append(self.finding(
                    source,
                    FindingKind.INVALID_MAILTO,
                    f"Invalid mailto link '{href}'.",
                    line,
                ))

            if anchor.get("target") != "_blank":
                findings.append(self.finding(
                    source,
                    FindingKind.MISSING_TARGET_BLANK,
                    f"Mailto link '{href}' should use target=\"_blank\".",
                    line,
                ))
        return findings


@RuleRegistry.register(Check.BROKEN_LINKS)
class BrokenLinkRule(FileRule):
    """
    Absolute http(s) links that don't answer with 2xx.

    All distinct URLs of a file are probed concurrently; the rule returns once
    every probe has settled. Each probe is bounded by the probe's own timeout.
    """

    uses_probe = True

    def configure(self, config: dict[str, Any]) -> None:
        super().configure(config)
        settings = config.get("broken_links", {})
        self.max_workers = max(1, int(settings.get("max_workers", 8)))

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        cursor = LineCursor(source.text)
        links: list[tuple[str, int | None]] = []

        for anchor in source.document.find_all("a"):
            href = (anchor.get("href") or "").strip()
            if not href.lower().startswith(("http://", "https://")):
                continue
            line = element_line(cursor, anchor, href)
            if self.is_ignored(source.line_text(line)):
                continue
            links.append((href, line))

        if not links:
            return []

        reachable = self._probe_all(list(dict.fromkeys(url for url, _ in links)))
        return [
            self.finding(source, FindingKind.BROKEN_LINK, f"Broken link: {url}", line)
            for url, line in links
            if not reachable[url]
        ]

    def _probe_all(self, urls: list[str]) -> dict[str, bool]:
        """Probe every URL concurrently and wait for all of them."""
        if self.probe is None:
            raise RuntimeError("broken-links needs a reachability probe")

        workers = min(self.max_workers, len(urls))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {url: executor.submit(self.probe, url) for url in urls}

        results: dict[str, bool] = {}
        for url, future in futures.items():
            try:
                results[url] = bool(future.result())
            except Exception as e:
                logger.warning("Probe raised for %s: %s", url, e)
                results[url] = False
        return results


@RuleRegistry.register(Check.MISSING_FOOTER)
class MissingFooterRule(FileRule):
    """Documents without a <footer> element."""

    extensions_key = "structure"

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        if source.document.find("footer") is not None:
            return []
        return [self.finding(
            source,
            FindingKind.MISSING_FOOTER,
            "Missing <footer> tag.",
            line_of(source.text, "<footer"),
        )]


@RuleRegistry.register(Check.MISSING_FAVICON)
class MissingFaviconRule(FileRule):
    """Documents without a favicon link."""

    extensions_key = "structure"

    def evaluate(self, source: SourceFile, index: ProjectIndex | None) -> list[Finding]:
        for link in source.document.find_all("link"):
            rel = link.get("rel") or []
            if isinstance(rel, str):
                rel = rel.split()
            if " ".join(rel).lower() in FAVICON_RELS:
                return []

        return [self.finding(
            source,
            FindingKind.MISSING_FAVICON,
            'Missing favicon <link rel="icon"> in <head>.',
            head_line(source.text),
        )]
