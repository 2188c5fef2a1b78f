"""Shared test fixtures for site_auditor tests."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable

import pytest

from site_auditor.config import DEFAULT_CONFIG, merge_config
from site_auditor.loader import SourceFile, load
from site_auditor.models import Check
from site_auditor.rules import RuleRegistry


class Site:
    """A throwaway project tree rooted in a pytest tmp dir."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def write(self, relpath: str, content: str | bytes = "") -> Path:
        path = self.root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    def mkdir(self, relpath: str) -> Path:
        path = self.root / relpath
        path.mkdir(parents=True, exist_ok=True)
        return path

    def source(self, relpath: str, content: str) -> SourceFile:
        return load(self.write(relpath, content))


class RecordingProbe:
    """Probe double: URLs in ``dead`` are unreachable; every call is recorded."""

    def __init__(self, dead: set[str] | None = None) -> None:
        self.dead = dead or set()
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, url: str) -> bool:
        with self._lock:
            self.calls.append(url)
        return url not in self.dead


@pytest.fixture
def site(tmp_path: Path) -> Site:
    """Empty project directory (resolved, so paths compare with scan output)."""
    return Site(tmp_path.resolve())


@pytest.fixture
def probe() -> RecordingProbe:
    return RecordingProbe()


@pytest.fixture
def config() -> dict:
    """Defaults plus a couple of deprecated names and domains."""
    return merge_config({
        "global_variables": {"names": ["$GLOBALS", "appState"]},
        "deprecated_domains": {"domains": ["old.example.com"]},
    })


@pytest.fixture
def run_rule() -> Callable:
    """Evaluate one file rule against a SourceFile."""
    def _run(check: Check, source: SourceFile, config: dict | None = None, probe=None, index=None):
        rule = RuleRegistry.create(check, config or DEFAULT_CONFIG, probe)
        return rule.evaluate(source, index)
    return _run
