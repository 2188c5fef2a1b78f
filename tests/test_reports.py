"""Tests for report exporters."""

from __future__ import annotations

import io
import json

import openpyxl
import pytest

from site_auditor.models import Finding, FindingKind
from site_auditor.reports import REPORT_TITLE, write_json, write_pdf, write_text, write_xlsx


@pytest.fixture
def findings():
    return [
        Finding(
            file_path="/site/index.html",
            file_name="index.html",
            kind=FindingKind.MISSING_ALT,
            message="Image with src 'logo.png' is missing alt text.",
            line_number=3,
        ),
        Finding(
            file_path="/site/old.png",
            file_name="old.png",
            kind=FindingKind.UNUSED_IMAGE,
            message="Image 'old.png' is never referenced.",
        ),
    ]


def test_json_report(findings):
    stream = io.StringIO()
    write_json(findings, stream)

    data = json.loads(stream.getvalue())

    assert data["count"] == 2
    assert data["findings"][0] == {
        "file_path": "/site/index.html",
        "file_name": "index.html",
        "line_number": 3,
        "type": "Missing alt",
        "kind": "MISSING_ALT",
        "message": "Image with src 'logo.png' is missing alt text.",
    }
    assert data["findings"][1]["line_number"] == "N/A"


def test_text_report(findings):
    stream = io.StringIO()
    write_text(findings, stream)

    lines = stream.getvalue().splitlines()

    assert lines[0] == "/site/index.html:3 [Missing alt] Image with src 'logo.png' is missing alt text."
    assert lines[1].startswith("/site/old.png:N/A [Unused image]")
    assert lines[-1] == "2 findings"


def test_xlsx_report(findings, tmp_path):
    path = write_xlsx(findings, str(tmp_path / "out" / "report.xlsx"))

    sheet = openpyxl.load_workbook(path).active

    assert sheet.title == REPORT_TITLE
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0] == ("#", "File Path", "File Name", "Line Number", "Type", "Message")
    assert rows[1][:5] == (1, "/site/index.html", "index.html", 3, "Missing alt")
    assert rows[2][3] == "N/A"
    assert len(rows) == 3


def test_pdf_report(findings, tmp_path):
    path = write_pdf(findings * 40, str(tmp_path / "report.pdf"))

    with open(path, "rb") as f:
        assert f.read(5) == b"%PDF-"


def test_empty_reports(tmp_path):
    stream = io.StringIO()
    write_text([], stream)
    assert stream.getvalue() == "0 findings\n"

    sheet = openpyxl.load_workbook(write_xlsx([], str(tmp_path / "empty.xlsx"))).active
    assert sheet.max_row == 1
