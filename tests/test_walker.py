"""Tests for directory traversal."""

from __future__ import annotations

import pytest

from site_auditor.config import DEFAULT_EXCLUDE
from site_auditor.errors import DirectoryNotFound
from site_auditor.walker import walk_dirs, walk_files


def test_walk_files_filters_extensions_and_prunes_ignored_dirs(site):
    site.write("index.html", "<p>hi</p>")
    site.write("style.css", "body {}")
    site.write("js/app.js", "let a = 1;")
    site.write("img/logo.png", b"\x89PNG")
    site.write("node_modules/lib/x.js", "x")

    files = walk_files(site.root, {".html", ".js"}, DEFAULT_EXCLUDE)
    assert [p.relative_to(site.root).as_posix() for p in files] == ["index.html", "js/app.js"]


def test_walk_files_without_allowlist_returns_everything(site):
    site.write("a.txt", "a")
    site.write("sub/b.png", b"b")

    files = walk_files(site.root, None, DEFAULT_EXCLUDE)
    assert sorted(p.name for p in files) == ["a.txt", "b.png"]


def test_walk_files_applies_suffix_patterns(site):
    site.write("js/app.js", "a")
    site.write("js/app.min.js", "a")

    files = walk_files(site.root, {".js"}, ["*.min.js"])
    assert [p.name for p in files] == ["app.js"]


def test_walk_dirs_includes_root_and_empty_dirs(site):
    site.mkdir("empty")
    site.mkdir("a/b")
    site.mkdir(".git/objects")

    dirs = walk_dirs(site.root, DEFAULT_EXCLUDE)
    rel = [d.relative_to(site.root).as_posix() for d in dirs]
    assert rel == [".", "a", "a/b", "empty"]


def test_missing_root_raises(tmp_path):
    missing = tmp_path / "nope"
    with pytest.raises(DirectoryNotFound):
        walk_dirs(missing, DEFAULT_EXCLUDE)
    with pytest.raises(DirectoryNotFound):
        list(walk_files(missing, None, DEFAULT_EXCLUDE))
