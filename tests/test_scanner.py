"""End-to-end tests for SiteScanner."""

from __future__ import annotations

import pytest

from site_auditor import DirectoryNotFound, ScanRequest, SiteScanner, scan_site
from site_auditor.models import FindingKind
from site_auditor.rules import MissingAltRule, UnknownCheck


def kinds(findings):
    return [f.kind for f in findings]


def test_missing_directory_is_fatal(tmp_path, probe):
    with pytest.raises(DirectoryNotFound):
        scan_site(tmp_path / "nope", probe=probe)


def test_unknown_check_is_rejected(site, probe):
    with pytest.raises(UnknownCheck):
        scan_site(site.root, checks=("no-such-check",), probe=probe)


def test_missing_alt_and_missing_image_share_position(site, probe):
    site.write("index.html", '<img src="logo.png">')

    findings = scan_site(site.root, probe=probe, read_only=True)

    alt = [f for f in findings if f.kind is FindingKind.MISSING_ALT]
    missing = [f for f in findings if f.kind is FindingKind.MISSING_IMAGE]
    assert len(alt) == 1 and len(missing) == 1
    assert alt[0].line_number == missing[0].line_number == 1
    assert alt[0].file_path == missing[0].file_path == str(site.root / "index.html")
    assert "logo.png" in missing[0].message


def test_per_file_then_project_order(site, probe):
    site.write("a.js", "console.log(1)\n<!-- c -->")

    findings = scan_site(site.root, probe=probe, read_only=True)

    assert kinds(findings) == [
        FindingKind.CONSOLE_STATEMENT,
        FindingKind.HTML_COMMENT,
        FindingKind.SUSPICIOUS_TEST_FILE,
    ]


def test_single_check_selection(site, probe):
    site.write("page.html", '<img src="a.png">\n<!-- note -->')

    findings = scan_site(site.root, checks=("html-comments",), probe=probe)

    assert kinds(findings) == [FindingKind.HTML_COMMENT]
    assert not (site.root / "index.php").exists()


def test_read_only_never_writes(site, probe):
    site.mkdir("sub")
    site.write("page.html", "<p>x</p>")

    findings = scan_site(site.root, probe=probe, read_only=True)

    assert FindingKind.MISSING_INDEX_FILE not in kinds(findings)
    assert not (site.root / "index.php").exists()
    assert not (site.root / "sub" / "index.php").exists()


def test_full_scan_creates_index_files_once(site, probe):
    site.mkdir("sub")

    first = scan_site(site.root, probe=probe)
    second = scan_site(site.root, probe=probe)

    assert kinds(first).count(FindingKind.MISSING_INDEX_FILE) == 2
    assert FindingKind.MISSING_INDEX_FILE not in kinds(second)


class TestFileScope:
    def test_requested_names_match_path_suffix(self, site, probe):
        site.write("pages/about.html", "<!-- a -->")
        site.write("xabout.html", "<!-- b -->")

        findings = scan_site(
            site.root,
            files=["about.html", "nope.html"],
            checks=("html-comments",),
            probe=probe,
        )

        assert [(f.kind, f.file_name) for f in findings] == [
            (FindingKind.HTML_COMMENT, "about.html"),
            (FindingKind.FILE_NOT_FOUND, "nope.html"),
        ]
        not_found = findings[1]
        assert not_found.file_path == str(site.root)
        assert not_found.line_number is None
        assert not_found.message == "The page 'nope.html' does not exist in the specified directory."

    def test_empty_page_name_from_form(self, site, probe):
        site.write("index.html", "<!-- a -->")
        request = ScanRequest.from_form(str(site.root), page_name="", check_type="file", check="html-comments")

        findings = SiteScanner(probe=probe).scan(request)

        assert kinds(findings) == [FindingKind.FILE_NOT_FOUND]

    def test_form_splits_comma_separated_names(self):
        request = ScanRequest.from_form("/site", page_name="a.html, b/c.php", check_type="file")
        assert request.files == ("a.html", "b/c.php")
        assert not request.is_project_scope
        assert ScanRequest.from_form("/site", page_name="a.html").is_project_scope


class TestFailureIsolation:
    def test_unreadable_file_becomes_finding(self, site, probe):
        site.write("broken.html", b"<p>\x00\x00</p>")
        site.write("ok.html", "<!-- still scanned -->")

        findings = scan_site(site.root, checks=("html-comments",), probe=probe)

        assert [(f.kind, f.file_name) for f in findings] == [
            (FindingKind.READ_FAILURE, "broken.html"),
            (FindingKind.HTML_COMMENT, "ok.html"),
        ]

    def test_rule_crash_becomes_finding(self, site, probe, monkeypatch):
        def boom(self, source, index):
            if source.name == "bad.html":
                raise RuntimeError("kaboom")
            return []

        monkeypatch.setattr(MissingAltRule, "evaluate", boom)
        site.write("bad.html", "<!-- x -->")
        site.write("good.html", "<!-- y -->")

        findings = scan_site(site.root, checks=("missing-alt", "html-comments"), probe=probe)

        assert [(f.kind, f.file_name) for f in findings] == [
            (FindingKind.UNEXPECTED_FAILURE, "bad.html"),
            (FindingKind.HTML_COMMENT, "bad.html"),
            (FindingKind.HTML_COMMENT, "good.html"),
        ]
        assert "kaboom" in findings[0].message


def test_ignore_marker_silences_line(site, probe):
    site.write("page.html", "\n".join([
        '<img src="a.png"> <!-- #evIgnore -->',
        "<script>console.log('x') // #evIgnore</script>",
    ]))

    findings = scan_site(
        site.root,
        checks=("missing-alt", "console-statements", "missing-images"),
        probe=probe,
    )

    assert findings == []


def test_insecure_url_reported_once(site, probe):
    site.write("page.html", '<a href="http://a.com">http://a.com</a>')

    findings = scan_site(site.root, checks=("insecure-urls",), probe=probe)

    assert len(findings) == 1


def test_broken_links_use_injected_probe(site):
    site.write("page.html", '<a href="https://dead.example.com">x</a>')
    calls = []

    def probe(url):
        calls.append(url)
        return False

    findings = scan_site(site.root, checks=("broken-links",), probe=probe)

    assert kinds(findings) == [FindingKind.BROKEN_LINK]
    assert calls == ["https://dead.example.com"]
